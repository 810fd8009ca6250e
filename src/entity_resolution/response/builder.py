"""
Response Builder

Builds the per-turn response object returned to the dialog engine.
A fresh response is built for every request; nothing is shared across turns.
"""

from typing import Any, Dict, Optional


def build_response(
    entity_resolution_status: Dict[str, Any],
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Build an initial resolution response.

    Args:
        entity_resolution_status: Status dict of the request, echoed back
            (and mutated) as part of the response
        context: Initial response context

    Returns:
        Response dict with structure:
        {
            "context": {...},
            "error": False,
            "validationResults": {},
            "keepProcessing": True,
            "cancel": False,
            "modifyContext": False,
            "entityResolutionStatus": {...}
        }
    """
    return {
        "context": context,
        "error": False,
        "validationResults": {},
        "keepProcessing": True,
        "cancel": False,
        "modifyContext": False,
        "entityResolutionStatus": entity_resolution_status,
    }
