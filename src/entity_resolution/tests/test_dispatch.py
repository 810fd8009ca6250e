"""
Tests for event dispatch.

Handler lookup, the shouldPrompt and validate protocol, async handlers,
error propagation and handler introspection.
"""

import asyncio
import logging

import pytest

from entity_resolution.context import ResolutionContext
from entity_resolution.dispatch import (
    EventDispatchEngine,
    HandlerTree,
    get_resolve_entities_event_handlers,
    invoke_resolve_entities_event_handlers,
    normalize_handler_result,
)
from entity_resolution.data_types import DispatchSignal, EntityEvent
from entity_resolution.testing import mock_event

from .fixtures import address_request, expense_request


def dispatch(request, handlers):
    context = ResolutionContext(request)
    response = asyncio.run(invoke_resolve_entities_event_handlers(handlers, context))
    return context, response


class Recorder:
    """Collects the handler paths that were invoked, in order."""

    def __init__(self):
        self.calls = []

    def handler(self, name, result=None):
        def _handler(properties, context):
            self.calls.append(name)
            return result
        return _handler


class TestNormalizeHandlerResult:
    """Tests for boolean interpretation of handler return values."""

    def test_none_is_true(self):
        """Test a handler without a return value counts as True."""
        assert normalize_handler_result(None) is True

    def test_booleans(self):
        """Test booleans are taken as is."""
        assert normalize_handler_result(True) is True
        assert normalize_handler_result(False) is False

    def test_string_true(self):
        """Test only the exact string 'true' is truthy."""
        assert normalize_handler_result("true") is True
        assert normalize_handler_result("True") is False
        assert normalize_handler_result("yes") is False
        assert normalize_handler_result(1) is False
        assert normalize_handler_result({}) is False


class TestHandlerLookup:
    """Tests for resolving events to handlers."""

    def test_handler_paths(self):
        """Test handler paths for item, nested item, custom and entity events."""
        tree = HandlerTree.from_dict({})
        assert tree.resolve(EntityEvent(name="validate", event_item="Type"))[1] == "Type.validate"
        assert tree.resolve(EntityEvent(name="validate", event_item="address.city"))[1] == "address.city.validate"
        assert tree.resolve(EntityEvent(name="reset", custom=True))[1] == "custom.reset"
        assert tree.resolve(EntityEvent(name="validate"))[1] == "entity.validate"

    def test_nested_item_handler(self):
        """Test nested item events walk the items tree."""
        recorder = Recorder()
        handlers = {"items": {"address": {"items": {"city": {"validate": recorder.handler("city")}}}}}

        _, response = dispatch(address_request([mock_event("validate", event_item="address.city")]), handlers)

        assert recorder.calls == ["city"]
        assert response["validationResults"] == {"address.city.validate": True}

    def test_non_callable_entries_ignored(self):
        """Test only callables count as event handlers."""
        tree = HandlerTree.from_dict({"entity": {"validate": "not a function"}})
        handler, _ = tree.resolve(EntityEvent(name="validate"))
        assert handler is None

    def test_component_with_handlers_attribute(self):
        """Test components may expose the tree as an attribute or method."""
        recorder = Recorder()

        class AttributeComponent:
            handlers = {"custom": {"customEvent": recorder.handler("attribute")}}

        class MethodComponent:
            def handlers(self):
                return {"custom": {"customEvent": recorder.handler("method")}}

        events = [mock_event("customEvent", custom=True)]
        dispatch(expense_request(events), AttributeComponent())
        dispatch(expense_request(events), MethodComponent())

        assert recorder.calls == ["attribute", "method"]


class TestShouldPrompt:
    """Tests for the shouldPrompt protocol."""

    def test_stops_at_first_true(self):
        """Test dispatch stops once an item should be prompted for."""
        recorder = Recorder()
        handlers = {"items": {
            "address": {"shouldPrompt": recorder.handler("address", False)},
            "schedule": {"shouldPrompt": recorder.handler("schedule", True)},
            "where": {"shouldPrompt": recorder.handler("where", True)},
        }}
        events = [mock_event("shouldPrompt", event_item=name) for name in ("address", "schedule", "where")]

        context, _ = dispatch(address_request(events), handlers)

        assert recorder.calls == ["address", "schedule"]
        assert context.get_should_prompt_cache() == {"address": False, "schedule": True}

    def test_all_false_runs_every_event(self):
        """Test every event is processed when no item should be prompted for."""
        recorder = Recorder()
        handlers = {"items": {
            "address": {"shouldPrompt": recorder.handler("address", False)},
            "where": {"shouldPrompt": recorder.handler("where", "false")},
        }}
        events = [mock_event("shouldPrompt", event_item=name) for name in ("address", "where")]

        context, _ = dispatch(address_request(events), handlers)

        assert recorder.calls == ["address", "where"]
        assert context.get_should_prompt_cache() == {"address": False, "where": False}


class TestValidate:
    """Tests for the validate protocol."""

    def test_validation_error_forces_false(self):
        """Test a registered validation error overrides a True result and stops dispatch."""
        recorder = Recorder()
        handlers = {
            "items": {"Type": {"validate": recorder.handler("Type", True)}},
            "entity": {"validate": recorder.handler("entity")},
        }

        _, response = dispatch(expense_request(), handlers)

        assert recorder.calls == ["Type"]
        assert response["validationResults"] == {"Type.validate": False}

    def test_handler_registers_error(self):
        """Test errors added by the handler itself also fail validation."""
        def validate_type(properties, context):
            if properties.get("newValue") == "Meal":
                context.add_validation_error("Type", "Meal is not allowed")

        request = expense_request([mock_event("validate", properties={"newValue": "Meal"}, event_item="Type")])
        request["entityResolutionStatus"]["validationErrors"] = {}

        _, response = dispatch(request, {"items": {"Type": {"validate": validate_type}}})

        assert response["validationResults"] == {"Type.validate": False}
        assert response["entityResolutionStatus"]["validationErrors"] == {"Type": "Meal is not allowed"}

    def test_valid_values_continue(self):
        """Test passing validations let dispatch continue to the next event."""
        recorder = Recorder()
        handlers = {
            "items": {"Type": {"validate": recorder.handler("Type")}},
            "entity": {"validate": recorder.handler("entity", "true")},
            "custom": {"customEvent": recorder.handler("custom", False)},
        }
        request = expense_request()
        request["entityResolutionStatus"]["validationErrors"] = {}

        _, response = dispatch(request, handlers)

        assert recorder.calls == ["Type", "entity", "custom"]
        assert response["validationResults"] == {"Type.validate": True, "entity.validate": True}

    def test_edit_form_mode_validates_everything(self):
        """Test a failed validation does not stop dispatch in edit form mode."""
        recorder = Recorder()
        handlers = {
            "items": {"Type": {"validate": recorder.handler("Type", False)}},
            "entity": {"validate": recorder.handler("entity", False)},
            "custom": {"customEvent": recorder.handler("custom")},
        }
        request = expense_request()
        request["entityResolutionStatus"]["editFormMode"] = True

        _, response = dispatch(request, handlers)

        assert recorder.calls == ["Type", "entity", "custom"]
        assert response["validationResults"] == {"Type.validate": False, "entity.validate": False}


class TestDispatchFlow:
    """Tests for ordering, missing handlers and handler failures."""

    def test_missing_handler_stops(self):
        """Test an event without a handler ends the turn's dispatch."""
        recorder = Recorder()
        handlers = {"custom": {"customEvent": recorder.handler("custom")}}

        _, response = dispatch(expense_request(), handlers)

        assert recorder.calls == []
        assert response["validationResults"] == {}

    def test_missing_handler_midway(self):
        """Test effects of handlers before a missing one are kept and later events never run."""
        recorder = Recorder()

        def skip_receipt(properties, context):
            recorder.calls.append("Type")
            context.skip_item("Receipt")

        handlers = {
            "items": {"Type": {"publishPromptMessage": skip_receipt}},
            "custom": {"customEvent": recorder.handler("custom")},
        }
        events = [
            mock_event("publishPromptMessage", event_item="Type"),
            mock_event("validate", event_item="Amount"),
            mock_event("customEvent", custom=True),
        ]

        context, _ = dispatch(expense_request(events), handlers)

        assert recorder.calls == ["Type"]
        assert context.is_skipped_item("Receipt")

    def test_no_events(self):
        """Test a request without events returns the initial response."""
        _, response = dispatch(expense_request([]), {})
        assert response["keepProcessing"] is True
        assert response["validationResults"] == {}

    def test_other_events_continue(self):
        """Test non-protocol events are invoked for their side effects only."""
        def publish_prompt(properties, context):
            context.add_message(f"Please enter the {properties['promptItem']}")
            return False

        recorder = Recorder()
        handlers = {"items": {"Type": {
            "publishPromptMessage": publish_prompt,
            "publishDisambiguateMessage": recorder.handler("disambiguate"),
        }}}
        events = [
            mock_event("publishPromptMessage", properties={"promptItem": "type"}, event_item="Type"),
            mock_event("publishDisambiguateMessage", event_item="Type"),
        ]

        _, response = dispatch(expense_request(events), handlers)

        assert recorder.calls == ["disambiguate"]
        assert response["messages"] == [{"type": "text", "text": "Please enter the type"}]

    def test_async_handlers_awaited_in_order(self):
        """Test coroutine handlers are awaited before the next event runs."""
        calls = []

        async def validate_type(properties, context):
            await asyncio.sleep(0)
            context.set_item_value("Type", "Taxi")
            calls.append("Type")
            return True

        def validate_entity(properties, context):
            calls.append(f"entity:{context.get_item_value('Type')}")

        request = expense_request()
        request["entityResolutionStatus"]["validationErrors"] = {}
        handlers = {"items": {"Type": {"validate": validate_type}}, "entity": {"validate": validate_entity}}

        _, response = dispatch(request, handlers)

        assert calls == ["Type", "entity:Taxi"]
        assert response["validationResults"] == {"Type.validate": True, "entity.validate": True}

    def test_handler_exception_propagates(self, caplog):
        """Test handler failures are logged and re-raised unchanged."""
        def broken(properties, context):
            raise RuntimeError("backend unavailable")

        context = ResolutionContext(expense_request())
        engine = EventDispatchEngine(context, {"items": {"Type": {"validate": broken}}})

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError, match="backend unavailable"):
                asyncio.run(engine.dispatch())

        assert "Event handler Type.validate failed" in caplog.text

    def test_process_event_signals(self):
        """Test the signal returned for a single event."""
        context = ResolutionContext(address_request())
        engine = EventDispatchEngine(context, {"items": {"where": {"shouldPrompt": lambda p, c: True}}})

        assert asyncio.run(engine.process_event(EntityEvent(name="shouldPrompt", event_item="where"))) is DispatchSignal.STOP
        assert asyncio.run(engine.process_event(EntityEvent(name="shouldPrompt", event_item="nowhere"))) is DispatchSignal.STOP


def test_get_resolve_entities_event_handlers():
    """Test handler names list every declared handler by dotted path."""
    def noop(properties, context):
        pass

    handlers = {
        "entity": {"validate": noop, "publishMessage": noop},
        "items": {
            "address": {"validate": noop, "items": {"city": {"shouldPrompt": noop}}},
            "where": {"validate": noop},
        },
        "custom": {"reset": noop},
    }

    assert get_resolve_entities_event_handlers(handlers) == [
        "entity.validate",
        "entity.publishMessage",
        "items.address.validate",
        "items.address.items.city.shouldPrompt",
        "items.where.validate",
        "custom.reset",
    ]
