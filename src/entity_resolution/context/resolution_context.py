"""
Resolution Context

The object passed to every entity event handler. Queries, validates and
changes the composite bag entity being resolved and its resolution status,
and shapes the turn's response (messages, cancel, transition).
"""

import logging
from typing import Any, Dict, List, Optional

from ..contracts.request_schema import validate_request
from ..data_types import CompositeBagItem, DisplayFunction, DisplayPropertyTable, EntityMap
from ..display.defaults import load_display_properties
from ..display.formatter import DisplayValueFormatter
from ..model.composite_bag import CompositeBagModel
from ..response.builder import build_response
from .base_context import BaseContext, MessageFactory


class ResolutionContext(BaseContext):
    """
    Context for one composite bag resolution turn.

    Constructed fresh from each request; discarded once the response is sent.

    Args:
        request: Resolution request sent by the dialog engine
        logger: Logger exposed to handlers
        message_factory: Message payload constructor used by add_message
        display_properties: Display table for this context; a fresh copy of
            the defaults when omitted

    Raises:
        MalformedRequestError: If the request violates the request schema
    """

    def __init__(
        self,
        request: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        message_factory: Optional[MessageFactory] = None,
        display_properties: Optional[DisplayPropertyTable] = None
    ):
        super().__init__(request, validate_request, logger, message_factory)
        self._status = self._response["entityResolutionStatus"]
        variable_name = request["variableName"]
        self._model = CompositeBagModel(
            request_context=self._response["context"],
            variable_name=variable_name,
            status=self._status,
            entity=self.get_variable(variable_name),
            store_entity=lambda entity: self.set_variable(variable_name, entity),
        )
        self._formatter = DisplayValueFormatter(
            self._model,
            display_properties if display_properties is not None else load_display_properties(),
        )

    def _build_response(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return build_response(request["entityResolutionStatus"])

    @property
    def model(self) -> CompositeBagModel:
        return self._model

    @property
    def formatter(self) -> DisplayValueFormatter:
        return self._formatter

    # ------------------------------------------------------------------
    # Composite bag entity
    # ------------------------------------------------------------------

    def get_entity(self) -> Optional[EntityMap]:
        """The JSON object holding the bag item values."""
        return self._model.get_entity()

    def set_entity(self, new_entity: Optional[EntityMap]) -> None:
        self._model.set_entity(new_entity)

    def get_entity_name(self) -> Optional[str]:
        return self._model.get_entity_name()

    def get_entity_items(self) -> List[CompositeBagItem]:
        return self._model.get_entity_items()

    def get_entity_item(self, full_name: str) -> Optional[CompositeBagItem]:
        return self._model.get_entity_item(full_name)

    def get_item_value(self, full_name: str) -> Any:
        return self._model.get_item_value(full_name)

    def set_item_value(self, full_name: str, value: Any) -> None:
        self._model.set_item_value(full_name, value)

    def clear_item_value(self, full_name: str) -> None:
        self._model.clear_item_value(full_name)

    # ------------------------------------------------------------------
    # Resolution status
    # ------------------------------------------------------------------

    def add_validation_error(self, item_name: str, error: str) -> None:
        """
        Mark an item value invalid.

        The new value is not stored and the error message is shown to the user.
        """
        self._model.add_validation_error(item_name, error)

    def get_validation_errors(self) -> Dict[str, Any]:
        return self._model.get_validation_errors()

    def get_disambiguation_values(self, item_name: str) -> List[Any]:
        return self._model.get_disambiguation_values(item_name)

    def set_disambiguation_values(self, item_name: str, values: List[Any]) -> None:
        self._model.set_disambiguation_values(item_name, values)

    def clear_disambiguation_values(self, item_name: Optional[str] = None) -> None:
        self._model.clear_disambiguation_values(item_name)

    def skip_item(self, name: str) -> None:
        """Stop prompting for an item."""
        self._model.skip_item(name)

    def unskip_item(self, name: str) -> None:
        self._model.unskip_item(name)

    def is_skipped_item(self, name: str) -> bool:
        return self._model.is_skipped_item(name)

    def get_current_item(self) -> Optional[str]:
        """Name of the item currently being resolved."""
        return self._model.get_current_item()

    def get_user_input(self) -> Optional[str]:
        """Last user text message; None when it was not a text message."""
        return self._model.get_user_input()

    def get_enum_values(self) -> List[Any]:
        """Enumeration values of the current item (current page only)."""
        return self._model.get_enum_values()

    def is_full_entity_matches(self) -> bool:
        """True when custom entity values are stored as {value, ...} objects."""
        return self._model.is_full_entity_matches()

    def is_edit_form_mode(self) -> bool:
        """True when all items are validated together (form editing)."""
        return self._model.is_edit_form_mode()

    def get_should_prompt_cache(self) -> Dict[str, bool]:
        return self._model.get_should_prompt_cache()

    def get_custom_property(self, name: str) -> Any:
        return self._model.get_custom_property(name)

    def set_custom_property(self, name: str, value: Any) -> None:
        """Keep state across handler calls; None removes the property."""
        self._model.set_custom_property(name, value)

    def get_items_updated(self) -> List[str]:
        """Items that had a value and got a new one from the last user input."""
        return self._model.get_matched_item_names("updatedEntities")

    def get_items_matched_out_of_order(self) -> List[str]:
        """Items that got a value while the user was prompted for another item."""
        return self._model.get_matched_item_names("outOfOrderMatches")

    def get_items_matched(self) -> List[str]:
        """Items that got a value from the last user input."""
        return self._model.get_matched_item_names("allMatches")

    # ------------------------------------------------------------------
    # Display values
    # ------------------------------------------------------------------

    def get_display_value(self, full_name: str) -> Any:
        return self._formatter.get_display_value(full_name)

    def get_display_values(self, *item_names: str) -> List[Dict[str, Any]]:
        return self._formatter.get_display_values(*item_names)

    def set_system_entity_display_properties(self, entity_name: str, properties: List[str]) -> None:
        self._formatter.set_display_properties(entity_name, properties)

    def set_system_entity_display_function(self, entity_name: str, function: DisplayFunction) -> None:
        self._formatter.set_display_function(entity_name, function)

    # ------------------------------------------------------------------
    # Messages and response shaping
    # ------------------------------------------------------------------

    def get_candidate_messages(self) -> Optional[List[Any]]:
        """Messages the dialog engine would send if no handler adds its own."""
        return self._request.get("candidateMessages")

    def add_candidate_messages(self) -> None:
        """Send the candidate messages and release the turn."""
        candidates = self.get_candidate_messages()
        if candidates is None:
            self._logger.debug("No candidate bot messages found")
            return
        self._logger.debug("Using candidate bot messages")
        self._response.setdefault("messages", []).extend(candidates)
        self._response["keepProcessing"] = False

    def get_messages(self) -> List[Any]:
        return self._response.get("messages") or []

    def add_message(self, payload: Any, keep_processing: bool = False) -> None:
        """
        Add a bot message to the response.

        Args:
            payload: String, dict or pydantic model, normalized by the message factory
            keep_processing: False (default) releases the turn after the
                messages are sent; True lets resolution continue in the same turn
        """
        self._response["keepProcessing"] = bool(keep_processing)
        self._response.setdefault("messages", []).append(self.construct_message_payload(payload))

    def cancel(self) -> None:
        """Cancel resolution; the component takes its cancel transition."""
        self._response["cancel"] = True

    def set_transition_action(self, action: str) -> None:
        """Abort resolution and transition on the given action."""
        self._response["transitionAction"] = action
