"""
Base Context

Request/response plumbing shared by invocation contexts: request
validation, the response context, scoped variable access, resource bundle
expressions and message payload construction.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from ..config.core import DEFAULT_VARIABLE
from ..messages.payload import construct_message_payload

MessageFactory = Callable[[Any], Optional[Dict[str, Any]]]


class BaseContext:
    """
    Super class for contexts passed to event handlers.

    Args:
        request: Invocation request payload
        validator: Optional callable asserting the request contract; raises
            before anything else reads the request
        logger: Logger exposed to handlers, defaults to this module's logger
        message_factory: Turns a string/dict payload into a message payload
    """

    def __init__(
        self,
        request: Dict[str, Any],
        validator: Optional[Callable[[Any], Any]] = None,
        logger: Optional[logging.Logger] = None,
        message_factory: Optional[MessageFactory] = None
    ):
        if validator is not None:
            validator(request)
        self._request = request
        self._logger = logger or logging.getLogger(__name__)
        self._message_factory = message_factory or construct_message_payload
        self._response = self._build_response(request)
        # Response context starts as the request context
        self._response["context"] = {"variables": {}, **(request.get("context") or {})}

    def _build_response(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return {"context": None, "error": False, "modifyContext": False}

    def get_request(self) -> Dict[str, Any]:
        return self._request

    def get_response(self) -> Dict[str, Any]:
        return self._response

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _variable_scope(self, name: str) -> Tuple[Dict[str, Any], str]:
        """
        Locate the context holding a variable.

        Names may be "<scope>.<name>". The scope is searched by walking the
        parent chain; a context that directly defines the full dotted name
        (e.g. "system.x" where system is not a scope) also matches.

        Returns:
            (context dict, variable name within that context)
        """
        context = self._response["context"]
        name_to_use = name
        scope_name, sep, rest = name.partition(".")
        if sep:
            possible_scope = context
            while possible_scope:
                if possible_scope.get("scope") == scope_name:
                    return possible_scope, rest
                if name_to_use in (possible_scope.get("variables") or {}):
                    return possible_scope, name_to_use
                possible_scope = possible_scope.get("parent")
        return context, name_to_use

    def get_variable(self, name: str) -> Any:
        """Value of a context variable, None when it does not exist."""
        context, name_to_use = self._variable_scope(name)
        variables = context.get("variables") or {}
        if name_to_use not in variables:
            return None
        return variables[name_to_use].get("value")

    def set_variable(self, name: str, value: Any) -> "BaseContext":
        """
        Set the value of a context variable.

        A variable that does not exist yet is created as a string variable.
        It is the caller's responsibility to set a value of the right type.
        """
        self._logger.debug(f"About to set variable {name}")
        context, name_to_use = self._variable_scope(name)
        variables = context.setdefault("variables", {})
        if not variables.get(name_to_use):
            self._logger.debug(f"Creating new variable {name_to_use}")
            variables[name_to_use] = dict(DEFAULT_VARIABLE)
        variables[name_to_use]["value"] = value
        self._response["modifyContext"] = True
        return self

    def translate(self, rb_key: str, *rb_args: Any) -> str:
        """
        Resource bundle expression for a skill-defined message key.

        The dialog engine resolves the expression after the response is
        received; only string arguments are quoted.

        Example:
            >>> context.translate("expense.confirm", "Taxi", 42)
            "${rb('expense.confirm','Taxi',42)}"
        """
        exp = "${rb('" + rb_key + "'"
        for arg in rb_args:
            exp += f",'{arg}'" if isinstance(arg, str) else f",{arg}"
        return exp + ")}"

    def construct_message_payload(self, payload: Any) -> Optional[Dict[str, Any]]:
        return self._message_factory(payload)
