"""
Event Dispatch Engine

Runs the events of one resolution turn, strictly in request order, against
the component's handler tree. Each handler is awaited before the next event
is looked at, so side effects of earlier handlers are visible to later ones.

Protocol rules:
- missing handler: stop the turn's dispatch (not an error)
- shouldPrompt: cache the answer for the item; stop on the first True
- validate: a registered validation error forces False; stop on False
  unless the resolution runs in edit form mode
- any other event: invoked for its effects only
"""

import inspect
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from ..config import config
from ..config.core import EVENT_SHOULD_PROMPT, EVENT_VALIDATE
from ..data_types import DispatchSignal, EntityEvent
from .handlers import HandlerTree, component_handlers

if TYPE_CHECKING:
    from ..context.resolution_context import ResolutionContext

logger = logging.getLogger(__name__)


def normalize_handler_result(value: Any) -> bool:
    """
    Interpret a handler return value as a boolean.

    - None (no return value) means True
    - a bool is taken as is
    - anything else is True only when its string form is exactly "true"
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    return str(value) == "true"


class EventDispatchEngine:
    """
    Dispatches the request events of a resolution context to a handler tree.

    Args:
        context: Resolution context of the turn
        handlers: Handler tree (dict) or component exposing one
        logger: Optional logger, defaults to the context logger
    """

    def __init__(self, context: "ResolutionContext", handlers: Any, logger: Optional[logging.Logger] = None):
        self._context = context
        self._tree = HandlerTree.from_dict(component_handlers(handlers))
        self._logger = logger or context.logger

    async def dispatch(self) -> Dict[str, Any]:
        """
        Process all events until the list is exhausted or a stop condition is hit.

        Returns:
            The context response

        Raises:
            Exception: Whatever a handler raises, unchanged
        """
        events = self._context.get_request().get("events") or []
        self._logger.debug(
            f"Dispatching {len(events)} event(s)",
            extra={"events_count": len(events), "variable_name": self._context.get_request().get("variableName")},
        )
        for raw_event in events:
            signal = await self.process_event(EntityEvent.from_dict(raw_event))
            if signal is DispatchSignal.STOP:
                break
        return self._context.get_response()

    async def process_event(self, event: EntityEvent) -> DispatchSignal:
        """Resolve, invoke and interpret a single event."""
        handler, handler_path = self._tree.resolve(event)
        log_extra = {"handler_path": handler_path, "event_name": event.name, "event_item": event.event_item}
        if handler is None:
            self._logger.debug(f"No handler found for event: {handler_path}", extra=log_extra)
            return DispatchSignal.STOP

        if config.LOG_EVENT_PROPERTIES:
            log_extra["properties"] = event.properties
        self._logger.debug(f"Invoking event handler {handler_path}", extra=log_extra)
        try:
            return_value = handler(event.properties, self._context)
            if inspect.isawaitable(return_value):
                return_value = await return_value
        except Exception as e:
            self._logger.error(
                f"Event handler {handler_path} failed",
                extra={**log_extra, "error_type": type(e).__name__},
                exc_info=True,
            )
            raise

        result = normalize_handler_result(return_value)
        self._logger.debug(f"{event.name} returned {result}", extra={**log_extra, "result": result})
        return self.interpret(event, handler_path, result)

    def interpret(self, event: EntityEvent, handler_path: str, result: bool) -> DispatchSignal:
        """Apply the event-specific rules to a normalized handler result."""
        if event.name == EVENT_SHOULD_PROMPT:
            self._context.get_should_prompt_cache()[event.event_item] = result
            # First item that should be prompted for wins
            return DispatchSignal.STOP if result else DispatchSignal.CONTINUE

        if event.name == EVENT_VALIDATE:
            if result and self._context.get_validation_errors():
                result = False
            self._context.get_response()["validationResults"][handler_path] = result
            if not result and not self._context.is_edit_form_mode():
                return DispatchSignal.STOP
            return DispatchSignal.CONTINUE

        return DispatchSignal.CONTINUE


async def invoke_resolve_entities_event_handlers(component: Any, context: "ResolutionContext") -> Dict[str, Any]:
    """
    Run all events of the context request against a component's handlers.

    Args:
        component: Handler tree or component exposing one
        context: Resolution context of the turn

    Returns:
        The context response
    """
    return await EventDispatchEngine(context, component).dispatch()
