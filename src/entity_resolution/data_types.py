"""
Data structures for composite bag resolution.

Typed views over the JSON structures the dialog engine sends each turn.
The raw dicts stay the source of truth (they are mutated and echoed back),
these dataclasses are read-only projections used for navigation.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .config.core import ITEM_TYPE_SUFFIX


class DispatchSignal(Enum):
    """Outcome of interpreting one event during dispatch."""
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class CompositeBagItem:
    """
    Definition of one bag item, supplied by the host.

    Attributes:
        name: Item name, unique among its siblings
        type: Item type (ENTITY, STRING, ATTACHMENT, LOCATION, ...)
        entity_name: Entity type name when type is ENTITY
        named_entity_sub_type: Optional subtype (e.g. INTERVAL for DATE_TIME)
        label: Optional display label, falls back to name
        children: Nested item definitions
    """
    name: str
    type: str
    entity_name: Optional[str] = None
    named_entity_sub_type: Optional[str] = None
    label: Optional[str] = None
    sequence_nr: Optional[int] = None
    description: Optional[str] = None
    children: List["CompositeBagItem"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompositeBagItem":
        """Build an item (and its children) from the wire format."""
        return cls(
            name=data["name"],
            type=data.get("type", ""),
            entity_name=data.get("entityName"),
            named_entity_sub_type=data.get("namedEntitySubType"),
            label=data.get("label"),
            sequence_nr=data.get("sequenceNr"),
            description=data.get("description"),
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )

    @property
    def display_label(self) -> str:
        return self.label or self.name

    def get_child(self, name: str) -> Optional["CompositeBagItem"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def entity_type_key(self) -> str:
        """
        Key into the display property table.

        ENTITY items use the entity name, with the subtype appended after a dot
        when present (DATE_TIME.INTERVAL). Other items use "<type>_ITEM".
        """
        if self.entity_name:
            if self.named_entity_sub_type:
                return f"{self.entity_name}.{self.named_entity_sub_type}"
            return self.entity_name
        return f"{self.type}{ITEM_TYPE_SUFFIX}"


@dataclass(frozen=True)
class EntityEvent:
    """
    One event of a resolution turn.

    Attributes:
        name: Event name (validate, shouldPrompt, publishPromptMessage, ...)
        event_item: Dotted item path for item-level events
        custom: True for custom events
        properties: Event properties passed to the handler
    """
    name: str
    event_item: Optional[str] = None
    custom: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityEvent":
        return cls(
            name=data["name"],
            event_item=data.get("eventItem"),
            custom=bool(data.get("custom", False)),
            properties=data.get("properties") or {},
        )


DisplayFunction = Callable[..., str]


@dataclass
class DisplayProperty:
    """
    How to render the value of one entity type.

    Attributes:
        properties: Keys extracted from the raw value object, in argument order
        function: Optional formatter called with the extracted values;
            without it the values are joined with a space
    """
    properties: List[str]
    function: Optional[DisplayFunction] = None

    def copy(self) -> "DisplayProperty":
        return DisplayProperty(properties=list(self.properties), function=self.function)


# Type aliases
EntityMap = Dict[str, Any]
DisplayPropertyTable = Dict[str, DisplayProperty]
