"""
Entity Resolution API

Entry point the host calls once per resolution turn: validate the request,
build a fresh context, dispatch the events to the component's handlers and
return the response.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .context.base_context import MessageFactory
from .context.resolution_context import ResolutionContext
from .dispatch.engine import EventDispatchEngine
from .logging_config import generate_turn_id


async def resolve_entities(
    request: Dict[str, Any],
    component: Any,
    logger: Optional[logging.Logger] = None,
    message_factory: Optional[MessageFactory] = None
) -> Dict[str, Any]:
    """
    Run one resolution turn.

    Args:
        request: Resolution request sent by the dialog engine
        component: Handler tree, or an object exposing it as "handlers"
        logger: Logger passed to handlers through the context
        message_factory: Optional message payload constructor

    Returns:
        Resolution response dict

    Raises:
        MalformedRequestError: If the request violates the request schema
            (no handler runs)
        Exception: Whatever an event handler raises

    Example:
        >>> response = await resolve_entities(request, {"entity": {"validate": check}})
        >>> response["validationResults"]
        {'entity.validate': True}
    """
    turn_logger = logger or logging.getLogger(__name__)
    context = ResolutionContext(request, logger=turn_logger, message_factory=message_factory)
    turn_id = generate_turn_id()
    turn_logger.debug(
        "Resolving entities",
        extra={"turn_id": turn_id, "variable_name": request.get("variableName"),
               "entity_name": context.get_entity_name()},
    )
    response = await EventDispatchEngine(context, component, turn_logger).dispatch()
    turn_logger.debug(
        "Resolution turn finished",
        extra={"turn_id": turn_id, "variable_name": request.get("variableName")},
    )
    return response


def resolve_entities_sync(
    request: Dict[str, Any],
    component: Any,
    logger: Optional[logging.Logger] = None,
    message_factory: Optional[MessageFactory] = None
) -> Dict[str, Any]:
    """Blocking variant of resolve_entities for hosts without an event loop."""
    return asyncio.run(resolve_entities(request, component, logger, message_factory))
