"""
Request fixtures shared by the entity resolution tests.

Each function returns a brand new request, so tests can mutate freely.
"""

from entity_resolution.testing import (
    mock_composite_bag_entity_variable,
    mock_composite_bag_item,
    mock_event,
    mock_event_handler_request,
)


def expense_variable():
    """Expense bag: custom, system, string and attachment items."""
    return mock_composite_bag_entity_variable("Expense", [
        mock_composite_bag_item("Type", "ENTITY", "ExpenseType"),
        mock_composite_bag_item("Amount", "ENTITY", "CURRENCY"),
        mock_composite_bag_item("ReasonMaxAmountExceeded", "STRING"),
        mock_composite_bag_item("Date", "ENTITY", "DATE", label="Expense date"),
        mock_composite_bag_item("Receipt", "ATTACHMENT"),
        mock_composite_bag_item("Confirmation", "ENTITY", "YES_NO"),
    ])


def expense_request(events=None):
    """
    Expense resolution request, mid-conversation.

    The user said "expense taxi and flight and meal": Type is ambiguous
    and "Meal" was already rejected by the dialog engine.
    """
    if events is None:
        events = [
            mock_event("validate", event_item="Type"),
            mock_event("validate"),
            mock_event("customEvent", custom=True),
        ]
    request = mock_event_handler_request(
        "expense", "Type", "expense taxi and flight and meal",
        "What is the expense type?", events, {"expense": expense_variable()},
    )
    status = request["entityResolutionStatus"]
    status["updatedEntities"] = [{"name": "Type", "type": "ENTITY", "entityName": "ExpenseType"}]
    status["outOfOrderMatches"] = [{"name": "Amount", "type": "ENTITY", "entityName": "CURRENCY"}]
    status["allMatches"] = [{"name": "Date", "type": "ENTITY", "entityName": "DATE"}]
    status["validationErrors"] = {"Type": "Meal is not allowed for you"}
    status["disambiguationValues"] = {"Type": ["Taxi", "Flight"]}
    return request


def address_variable():
    """Bag with a nested address item and a recurring date item."""
    return mock_composite_bag_entity_variable("Visit", [
        mock_composite_bag_item("address", "ENTITY", "Address", children=[
            mock_composite_bag_item("street", "STRING"),
            mock_composite_bag_item("city", "ENTITY", "City"),
        ]),
        mock_composite_bag_item("schedule", "ENTITY", "DATE_TIME", sub_type="RECURRING", children=[
            mock_composite_bag_item("startDate", "ENTITY", "DATE_TIME", sub_type="DATE", label="Start"),
            mock_composite_bag_item("frequency", "STRING", label="Every"),
        ]),
        mock_composite_bag_item("where", "LOCATION"),
    ])


def address_request(events=None):
    """Visit resolution request with no value resolved yet."""
    return mock_event_handler_request(
        "visit", "address", "Main street 1", "Where do you live?",
        events or [], {"visit": address_variable()},
    )
