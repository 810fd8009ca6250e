"""
Tests for the resolution request contract.
"""

import pytest

from entity_resolution.contracts import EntityResolutionRequest, validate_request
from entity_resolution.errors import EntityResolutionError, MalformedRequestError

from .fixtures import expense_request


def test_valid_request_returns_model():
    """Test a well-formed request validates into the request model."""
    model = validate_request(expense_request())

    assert isinstance(model, EntityResolutionRequest)
    assert model.variableName == "expense"
    assert [event.name for event in model.events] == ["validate", "validate", "customEvent"]
    assert model.events[2].custom is True


def test_missing_status_collections_are_filled_in():
    """Test absent status collections are written back into the raw request."""
    request = expense_request()
    request["entityResolutionStatus"] = {"resolvingField": "Type"}

    validate_request(request)

    status = request["entityResolutionStatus"]
    assert status["skippedItems"] == []
    assert status["validationErrors"] == {}
    assert status["shouldPromptCache"] == {}
    assert status["customProperties"] == {}
    assert status["resolvingField"] == "Type"


def test_events_default_to_empty():
    """Test a request without events is valid."""
    request = expense_request()
    del request["events"]
    assert validate_request(request).events == []


def test_unknown_fields_allowed():
    """Test fields added by newer dialog engines do not break validation."""
    request = expense_request()
    request["tenantId"] = "acme"
    request["entityResolutionStatus"]["pageNumber"] = 2
    validate_request(request)


def test_event_without_name():
    """Test every event needs a name."""
    request = expense_request()
    request["events"].append({"custom": True})

    with pytest.raises(MalformedRequestError) as exc_info:
        validate_request(request)

    locations = [error["loc"] for error in exc_info.value.errors]
    assert ("events", 3, "name") in locations


def test_missing_status():
    """Test the entity resolution status is required."""
    request = expense_request()
    del request["entityResolutionStatus"]

    with pytest.raises(MalformedRequestError) as exc_info:
        validate_request(request)

    assert exc_info.value.details["title"] == "Request body malformed"
    assert "entityResolutionStatus" in exc_info.value.details["detail"]
    assert isinstance(exc_info.value, EntityResolutionError)


def test_wrong_field_type():
    """Test type violations are reported."""
    request = expense_request()
    request["entityResolutionStatus"]["skippedItems"] = "Receipt"

    with pytest.raises(MalformedRequestError):
        validate_request(request)
