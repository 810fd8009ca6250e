"""
Entity Resolution Error Classes

Custom exceptions for the composite bag resolution engine.

Only structural problems are raised here:
- MalformedRequestError: inbound request rejected by the request schema
- UnknownDisplayEntityError: display override for an unconfigured entity type

Field-level validation failures are response data, not exceptions, and
exceptions raised by event handlers propagate unchanged.
"""

from typing import Any, Dict, List, Optional

from ..config.core import BAD_REQUEST_CODE, BAD_REQUEST_NAME


class EntityResolutionError(Exception):
    """Base class for entity resolution errors."""
    pass


class MalformedRequestError(EntityResolutionError):
    """
    Raised when the resolution request body does not match the request schema.

    Attributes:
        name: Stable error name callers dispatch on ("badRequest")
        code: Error code reported to the dialog engine
        details: Structured error details (title, detail, errorCode,
            requestBody, errors)
    """

    name = BAD_REQUEST_NAME
    code = BAD_REQUEST_CODE

    def __init__(
        self,
        message: str = "Request body malformed",
        errors: Optional[List[Dict[str, Any]]] = None,
        request_body: Any = None
    ):
        super().__init__(message)
        self.errors = errors or []
        self.details = {
            "title": message,
            "detail": "; ".join(_describe_error(e) for e in self.errors),
            "errorCode": self.code,
            "requestBody": request_body,
            "errors": self.errors,
        }


class UnknownDisplayEntityError(EntityResolutionError, KeyError):
    """Raised when a display function is set for an entity type without display properties."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown display entity"


def _describe_error(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid')}" if location else str(error.get("msg", "invalid"))
