"""
Entity Resolution - Composite Bag Event Handling

Runs the custom event handlers a component declares for composite bag
entity resolution and exposes the resolution context they operate on.

This package provides:
- Resolution context: bag values, resolution status, display values, messages (context/)
- Event dispatch: handler lookup and the shouldPrompt/validate protocol (dispatch/)
- Request contract: schema validation of the inbound request (contracts/)
- Test helpers: mock requests for handler unit tests (testing/)
"""

from entity_resolution.config import config, EntityResolutionConfig

from entity_resolution.data_types import (
    # Enums
    DispatchSignal,

    # Data structures
    CompositeBagItem,
    EntityEvent,
    DisplayProperty,

    # Type aliases
    EntityMap,
    DisplayPropertyTable,
)

from entity_resolution.errors import (
    EntityResolutionError,
    MalformedRequestError,
    UnknownDisplayEntityError,
)

from entity_resolution.context import BaseContext, ResolutionContext
from entity_resolution.dispatch import (
    EventDispatchEngine,
    invoke_resolve_entities_event_handlers,
    get_resolve_entities_event_handlers,
)
from entity_resolution.api import resolve_entities, resolve_entities_sync

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "config",
    "EntityResolutionConfig",

    # Types
    "DispatchSignal",
    "CompositeBagItem",
    "EntityEvent",
    "DisplayProperty",
    "EntityMap",
    "DisplayPropertyTable",

    # Errors
    "EntityResolutionError",
    "MalformedRequestError",
    "UnknownDisplayEntityError",

    # Context and dispatch
    "BaseContext",
    "ResolutionContext",
    "EventDispatchEngine",
    "invoke_resolve_entities_event_handlers",
    "get_resolve_entities_event_handlers",
    "resolve_entities",
    "resolve_entities_sync",
]
