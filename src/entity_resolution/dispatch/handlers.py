"""
Entity Event Handler Tree

Typed view over the handler tree a component declares:

    {
        "entity": {"<event>": fn, ...},
        "items": {
            "<item>": {"<event>": fn, ..., "items": {"<child item>": {...}}},
        },
        "custom": {"<event>": fn, ...},
    }

Handlers are called as handler(event_properties, context) and may be plain
functions or coroutine functions.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config.core import HANDLER_PATH_SEPARATOR, HANDLERS_CUSTOM, HANDLERS_ENTITY, HANDLERS_ITEMS
from ..data_types import EntityEvent

EventHandler = Callable[..., Any]


@dataclass
class HandlerNode:
    """
    Handlers of one bag item plus the nodes of its child items.

    Attributes:
        events: Event name to handler
        items: Child item name to node
    """
    events: Dict[str, EventHandler] = field(default_factory=dict)
    items: Dict[str, "HandlerNode"] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "HandlerNode":
        node = cls()
        for key, value in (data or {}).items():
            if key == HANDLERS_ITEMS and isinstance(value, Mapping):
                node.items = {name: cls.from_dict(child) for name, child in value.items()}
            elif callable(value):
                node.events[key] = value
        return node

    def find(self, path: Sequence[str]) -> Optional["HandlerNode"]:
        """Descend along child item names; None when any step is missing."""
        node: Optional[HandlerNode] = self
        for segment in path:
            node = node.items.get(segment) if node else None
            if node is None:
                return None
        return node


@dataclass
class HandlerTree:
    """Entity-level, item-level and custom handlers of a component."""
    entity: Dict[str, EventHandler] = field(default_factory=dict)
    root: HandlerNode = field(default_factory=HandlerNode)
    custom: Dict[str, EventHandler] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "HandlerTree":
        data = data or {}
        return cls(
            entity={k: v for k, v in (data.get(HANDLERS_ENTITY) or {}).items() if callable(v)},
            root=HandlerNode.from_dict({HANDLERS_ITEMS: data.get(HANDLERS_ITEMS) or {}}),
            custom={k: v for k, v in (data.get(HANDLERS_CUSTOM) or {}).items() if callable(v)},
        )

    def resolve(self, event: EntityEvent) -> Tuple[Optional[EventHandler], str]:
        """
        Find the handler for an event.

        Returns:
            (handler or None, handler path), where the handler path is
            "<eventItem>.<event>", "custom.<event>" or "entity.<event>"
        """
        if event.event_item:
            node = self.root.find(event.event_item.split(HANDLER_PATH_SEPARATOR))
            handler = node.events.get(event.name) if node else None
            return handler, f"{event.event_item}{HANDLER_PATH_SEPARATOR}{event.name}"
        if event.custom:
            return self.custom.get(event.name), f"{HANDLERS_CUSTOM}{HANDLER_PATH_SEPARATOR}{event.name}"
        return self.entity.get(event.name), f"{HANDLERS_ENTITY}{HANDLER_PATH_SEPARATOR}{event.name}"


def component_handlers(component: Any) -> Mapping[str, Any]:
    """
    Raw handler tree of a component.

    A component may be the tree itself, or an object whose "handlers"
    attribute is the tree or a zero-argument callable returning it.
    """
    if isinstance(component, Mapping):
        return component
    handlers = getattr(component, "handlers", None)
    if callable(handlers):
        handlers = handlers()
    return handlers or {}


def _item_event_names(prefix: str, node: HandlerNode) -> List[str]:
    names = []
    for item_name, child in node.items.items():
        item_prefix = f"{prefix}.{item_name}"
        names.extend(f"{item_prefix}.{event}" for event in child.events)
        names.extend(_item_event_names(f"{item_prefix}.{HANDLERS_ITEMS}", child))
    return names


def get_resolve_entities_event_handlers(component: Any) -> List[str]:
    """
    Dotted names of all event handlers a component declares.

    Used for component metadata; e.g. ["entity.validate",
    "items.address.items.city.shouldPrompt", "custom.reset"].
    """
    handlers = component_handlers(component)
    tree = HandlerTree.from_dict(handlers)
    events: List[str] = []
    for key in handlers:
        if key == HANDLERS_ENTITY:
            events.extend(f"{HANDLERS_ENTITY}.{event}" for event in tree.entity)
        elif key == HANDLERS_ITEMS:
            events.extend(_item_event_names(HANDLERS_ITEMS, tree.root))
        elif key == HANDLERS_CUSTOM:
            events.extend(f"{HANDLERS_CUSTOM}.{event}" for event in tree.custom)
    return events
