"""
Composite Bag Model

The addressable data structure behind one resolution turn:
- bag item definitions (a tree, addressed by dash-joined full names)
- the current bag value (an EntityMap tree mirroring the definitions)
- the entity resolution status (skips, validation errors, disambiguation,
  custom properties, should-prompt cache)

All operations are synchronous in-memory mutations. The status dict is the
same object that is echoed back in the response, so every change made here
is visible to the dialog engine.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..config.core import ITEM_SEPARATOR, SKILL_SCOPE
from ..data_types import CompositeBagItem, EntityMap

logger = logging.getLogger(__name__)


def resolve_variable_definition(request_context: Dict[str, Any], variable_name: str) -> Optional[Dict[str, Any]]:
    """
    Find the variable metadata for the bag variable.

    Dialog 2.0 skill-scoped variables ("skill.<name>") live in the parent
    context when that parent has scope "skill".

    Args:
        request_context: The request "context" object
        variable_name: Name of the composite bag variable

    Returns:
        The variable metadata dict, or None if it is not defined
    """
    prefix = f"{SKILL_SCOPE}."
    parent = request_context.get("parent")
    if variable_name.startswith(prefix) and isinstance(parent, dict) and parent.get("scope") == SKILL_SCOPE:
        return (parent.get("variables") or {}).get(variable_name[len(prefix):])
    return (request_context.get("variables") or {}).get(variable_name)


def new_entity_map(item: Optional[CompositeBagItem]) -> EntityMap:
    """Empty EntityMap for a nested bag item, typed after its definition."""
    entity_map: EntityMap = {}
    if item is None:
        return entity_map
    if item.entity_name:
        entity_map["entityName"] = item.entity_name
    if item.named_entity_sub_type:
        entity_map["subType"] = item.named_entity_sub_type
    return entity_map


class CompositeBagModel:
    """
    Read/write access to a composite bag value and its resolution status.

    Args:
        request_context: The request "context" object holding variable metadata
        variable_name: Name of the composite bag variable being resolved
        status: The entityResolutionStatus dict (mutated in place)
        entity: Current bag value, or None when nothing is resolved yet
        store_entity: Callback writing a (new) bag value back to its variable
    """

    def __init__(
        self,
        request_context: Dict[str, Any],
        variable_name: str,
        status: Dict[str, Any],
        entity: Optional[EntityMap] = None,
        store_entity: Optional[Callable[[EntityMap], None]] = None
    ):
        self._request_context = request_context
        self._variable_name = variable_name
        self._status = status
        self._entity = entity
        self._store_entity = store_entity or (lambda value: None)
        self._items: Optional[List[CompositeBagItem]] = None

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def _variable_type(self) -> Dict[str, Any]:
        definition = resolve_variable_definition(self._request_context, self._variable_name) or {}
        var_type = definition.get("type")
        return var_type if isinstance(var_type, dict) else {}

    def get_entity_name(self) -> Optional[str]:
        """Name of the composite bag entity type being resolved."""
        return self._variable_type().get("name")

    def get_entity_items(self) -> List[CompositeBagItem]:
        """Top-level bag item definitions."""
        if self._items is None:
            raw_items = self._variable_type().get("compositeBagItems") or []
            self._items = [CompositeBagItem.from_dict(item) for item in raw_items]
        return self._items

    def get_entity_item(self, full_name: str) -> Optional[CompositeBagItem]:
        """
        Definition of a (possibly nested) bag item.

        Args:
            full_name: Dash-joined path from the top-level item, e.g. "address-city"

        Returns:
            The item definition, or None when any segment is not defined
        """
        candidates = self.get_entity_items()
        item = None
        for segment in full_name.split(ITEM_SEPARATOR):
            item = next((c for c in candidates if c.name == segment), None)
            if item is None:
                logger.debug(
                    f"No bag item definition found for {full_name} (missing segment {segment})",
                    extra={"variable_name": self._variable_name},
                )
                return None
            candidates = item.children
        return item

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get_entity(self) -> Optional[EntityMap]:
        return self._entity

    def set_entity(self, new_entity: Optional[EntityMap]) -> None:
        """Replace the whole bag value."""
        self._entity = new_entity
        self._status.pop("resolvingField", None)
        self._store_entity(self._entity)
        self.clear_should_prompt_cache()

    def get_item_value(self, full_name: str) -> Any:
        """Value of a (possibly nested) bag item, None when not set."""
        node: Any = self._entity
        for segment in full_name.split(ITEM_SEPARATOR):
            if not isinstance(node, dict):
                return None
            node = node.get(segment)
        return node

    def set_item_value(self, full_name: str, value: Any) -> None:
        """
        Set the value of a (possibly nested) bag item.

        Missing ancestor EntityMaps are created on the way down, typed after
        their item definitions, so the value tree stays complete up to the leaf.
        """
        if self._entity is None:
            self._entity = {"entityName": self.get_entity_name()}
            self._store_entity(self._entity)

        segments = full_name.split(ITEM_SEPARATOR)
        node = self._entity
        definitions = self.get_entity_items()
        for segment in segments[:-1]:
            item = next((d for d in definitions if d.name == segment), None)
            child = node.get(segment)
            if not isinstance(child, dict):
                child = new_entity_map(item)
                node[segment] = child
            node = child
            definitions = item.children if item else []
        node[segments[-1]] = value
        self.clear_should_prompt_cache()

    def clear_item_value(self, full_name: str) -> None:
        """Remove the value of a (possibly nested) bag item."""
        segments = full_name.split(ITEM_SEPARATOR)
        parent = self.get_item_value(ITEM_SEPARATOR.join(segments[:-1])) if len(segments) > 1 else self._entity
        if isinstance(parent, dict):
            parent.pop(segments[-1], None)
        self.clear_should_prompt_cache()

    # ------------------------------------------------------------------
    # Skipped items
    # ------------------------------------------------------------------

    def skip_item(self, name: str) -> None:
        skipped = self._status["skippedItems"]
        if name not in skipped:
            skipped.append(name)
        # The item being resolved no longer needs a value
        if name == self._status.get("resolvingField"):
            self._status.pop("resolvingField", None)

    def unskip_item(self, name: str) -> None:
        self._status["skippedItems"] = [item for item in self._status["skippedItems"] if item != name]

    def is_skipped_item(self, name: str) -> bool:
        return name in self._status["skippedItems"]

    # ------------------------------------------------------------------
    # Validation errors
    # ------------------------------------------------------------------

    def add_validation_error(self, item_name: str, error: str) -> None:
        self._status["validationErrors"][item_name] = error

    def get_validation_errors(self) -> Dict[str, Any]:
        return self._status["validationErrors"]

    # ------------------------------------------------------------------
    # Disambiguation
    # ------------------------------------------------------------------

    def get_disambiguation_values(self, item_name: str) -> List[Any]:
        """
        Candidate values found in the last user input for an item.

        Strings for custom entity items, objects for system entity items
        (or for all items when full entity matches are enabled).
        """
        return self._status["disambiguationValues"].get(item_name) or []

    def set_disambiguation_values(self, item_name: str, values: List[Any]) -> None:
        self._status["disambiguationValues"][item_name] = values

    def clear_disambiguation_values(self, item_name: Optional[str] = None) -> None:
        """Clear the candidates of one item, or of all items when no name is given."""
        if item_name:
            self._status["disambiguationValues"].pop(item_name, None)
        else:
            self._status["disambiguationValues"] = {}

    # ------------------------------------------------------------------
    # Should-prompt cache
    # ------------------------------------------------------------------

    def get_should_prompt_cache(self) -> Dict[str, bool]:
        return self._status["shouldPromptCache"]

    def clear_should_prompt_cache(self) -> None:
        # Prompting decisions may depend on other item values
        self._status["shouldPromptCache"] = {}

    # ------------------------------------------------------------------
    # Custom properties
    # ------------------------------------------------------------------

    def get_custom_property(self, name: str) -> Any:
        return self._status["customProperties"].get(name)

    def set_custom_property(self, name: str, value: Any) -> None:
        """Store turn-spanning handler state; a None value removes the property."""
        if value is None:
            self._status["customProperties"].pop(name, None)
        else:
            self._status["customProperties"][name] = value

    # ------------------------------------------------------------------
    # Turn facts (read-only)
    # ------------------------------------------------------------------

    def get_current_item(self) -> Optional[str]:
        return self._status.get("resolvingField")

    def get_user_input(self) -> Optional[str]:
        return self._status.get("userInput")

    def get_enum_values(self) -> List[Any]:
        return self._status.get("enumValues") or []

    def is_full_entity_matches(self) -> bool:
        return bool(self._status.get("useFullEntityMatches"))

    def is_edit_form_mode(self) -> bool:
        return bool(self._status.get("editFormMode"))

    def get_matched_item_names(self, key: str) -> List[str]:
        """Item names of one of the match lists (updatedEntities, outOfOrderMatches, allMatches)."""
        return [match["name"] for match in self._status.get(key) or []]
