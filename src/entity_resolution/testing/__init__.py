"""
Testing helpers for entity event handlers.
"""

from .mock_request import (
    mock_event,
    mock_composite_bag_item,
    mock_composite_bag_entity_variable,
    mock_event_handler_request,
)

__all__ = [
    "mock_event",
    "mock_composite_bag_item",
    "mock_composite_bag_entity_variable",
    "mock_event_handler_request",
]
