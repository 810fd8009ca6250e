"""
Event Dispatch Module

Routes the events of a resolution turn to the component's handlers.
"""

from .engine import EventDispatchEngine, normalize_handler_result, invoke_resolve_entities_event_handlers
from .handlers import HandlerNode, HandlerTree, component_handlers, get_resolve_entities_event_handlers

__all__ = [
    "EventDispatchEngine",
    "normalize_handler_result",
    "invoke_resolve_entities_event_handlers",
    "HandlerNode",
    "HandlerTree",
    "component_handlers",
    "get_resolve_entities_event_handlers",
]
