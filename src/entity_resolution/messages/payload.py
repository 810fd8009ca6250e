"""
Message payload construction.

Default message factory used by ResolutionContext.add_message. The full
conversation message model lives with the host; this module only turns the
common inputs into a payload the dialog engine accepts:
- a string becomes a text message
- a dict (or pydantic model) with a known message type is used as is
- anything else is wrapped in a raw message
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

MESSAGE_TYPES = {"text", "card", "attachment", "location", "postback", "raw", "command", "editForm"}


class MessagePayload(BaseModel):
    """Minimal shape every outbound message payload has."""
    model_config = ConfigDict(extra="allow")

    type: str


def text_message(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def raw_message(payload: Any) -> Dict[str, Any]:
    return {"type": "raw", "payload": payload}


def construct_message_payload(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize a string, dict or pydantic model into a message payload.

    Returns:
        Message payload dict, or None when there is nothing to send
    """
    if payload is None:
        return None
    if isinstance(payload, str):
        return text_message(payload)
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_none=True)
    if isinstance(payload, dict):
        try:
            message = MessagePayload.model_validate(payload)
        except ValidationError as e:
            logger.debug(f"Message payload validation error, using raw payload: {e.errors(include_url=False)}")
            return raw_message(payload)
        if message.type in MESSAGE_TYPES:
            return message.model_dump(exclude_none=True)
        logger.debug(f"Unknown message type '{message.type}', using raw payload")
    return raw_message(payload)
