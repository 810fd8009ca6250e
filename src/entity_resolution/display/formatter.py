"""
Display Value Formatter

Renders raw bag item values as human-readable strings, driven by a
per-entity-type display property table.
"""

from typing import Any, Dict, List, Optional

from ..config.core import ITEM_SEPARATOR, RECURRING_ENTITY_KEY
from ..data_types import CompositeBagItem, DisplayFunction, DisplayPropertyTable, DisplayProperty
from ..errors.exceptions import UnknownDisplayEntityError
from ..model.composite_bag import CompositeBagModel
from .defaults import load_display_properties


class DisplayValueFormatter:
    """
    Formats bag item values for display.

    Args:
        model: The composite bag being resolved
        display_properties: Display table owned by this formatter; a fresh
            default table is loaded when omitted
    """

    def __init__(self, model: CompositeBagModel, display_properties: Optional[DisplayPropertyTable] = None):
        self._model = model
        self._display_properties = display_properties if display_properties is not None else load_display_properties()

    @property
    def display_properties(self) -> DisplayPropertyTable:
        return self._display_properties

    def set_display_properties(self, entity_name: str, properties: List[str]) -> None:
        """Override which value properties are shown for an entity type."""
        entry = self._display_properties.get(entity_name)
        if entry is None:
            self._display_properties[entity_name] = DisplayProperty(properties=list(properties))
        else:
            entry.properties = list(properties)

    def set_display_function(self, entity_name: str, function: DisplayFunction) -> None:
        """
        Override the function applied to the display property values.

        Raises:
            UnknownDisplayEntityError: If the entity type has no display properties
        """
        entry = self._display_properties.get(entity_name)
        if entry is None:
            raise UnknownDisplayEntityError(
                f"No display properties configured for '{entity_name}', set properties first"
            )
        entry.function = function

    def get_display_value(self, full_name: str) -> Any:
        """
        Display value of a (possibly nested) bag item.

        Items without a definition are returned unformatted.
        """
        raw_value = self._model.get_item_value(full_name)
        item = self._model.get_entity_item(full_name)
        if item is None:
            return raw_value
        entity_key = item.entity_type_key()
        if entity_key == RECURRING_ENTITY_KEY:
            return self._format_recurring(full_name, item, raw_value)
        return self.format_value(entity_key, raw_value)

    def get_display_values(self, *item_names: str) -> List[Dict[str, Any]]:
        """
        Display values of the top-level items that currently have a value.

        Args:
            item_names: Optional filter; all items with a value when empty
        """
        entity = self._model.get_entity() or {}
        values = []
        for item in self._model.get_entity_items():
            if item.name not in entity:
                continue
            if item_names and item.name not in item_names:
                continue
            display = {"name": item.name, "value": self.get_display_value(item.name)}
            if item.label:
                display["label"] = item.label
            values.append(display)
        return values

    def format_value(self, entity_key: str, raw_value: Any) -> Any:
        """Render a raw value (or list of values) using the table entry for entity_key."""
        if raw_value is None:
            return None
        entry = self._display_properties.get(entity_key)
        if isinstance(raw_value, list):
            return ", ".join(str(self._format_single(entry, v)) for v in raw_value)
        return self._format_single(entry, raw_value)

    def _format_single(self, entry: Optional[DisplayProperty], value: Any) -> Any:
        if entry and entry.properties and isinstance(value, dict):
            args = [value.get(p) for p in entry.properties]
            if entry.function:
                return entry.function(*args)
            return " ".join("" if arg is None else str(arg) for arg in args)
        if self._model.is_full_entity_matches() and isinstance(value, dict) and "value" in value:
            return value["value"]
        return value

    def _format_recurring(self, full_name: str, item: CompositeBagItem, raw_value: Any) -> Any:
        if not isinstance(raw_value, dict):
            return raw_value
        parts = []
        for child in item.children:
            if child.name not in raw_value:
                continue
            child_value = self.get_display_value(f"{full_name}{ITEM_SEPARATOR}{child.name}")
            parts.append(f"{child.display_label}: {child_value}")
        return ", ".join(parts)
