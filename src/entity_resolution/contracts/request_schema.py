"""
Resolution Request Contract

Schema validation for the resolution request the dialog engine sends each
turn. Fail fast on violations, before any event handler runs.

The validated model is only used as a gate and to fill in status defaults;
the raw request dict remains the object the context reads and mutates.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors.exceptions import MalformedRequestError


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class VariableType(_WireModel):
    name: Optional[str] = None
    type: Optional[str] = None
    compositeBagItems: Optional[List[Dict[str, Any]]] = None


class ContextVariable(_WireModel):
    entity: bool = False
    type: Any = None
    value: Any = None


class RequestContext(_WireModel):
    variables: Dict[str, ContextVariable] = Field(default_factory=dict)
    parent: Optional[Dict[str, Any]] = None


class EntityEventModel(_WireModel):
    name: str
    eventItem: Optional[str] = None
    custom: bool = False
    properties: Optional[Dict[str, Any]] = None


class MatchedItem(_WireModel):
    name: str
    type: Optional[str] = None
    entityName: Optional[str] = None


class EntityResolutionStatusModel(_WireModel):
    name: Optional[str] = None
    resolvingField: Optional[str] = None
    validationErrors: Dict[str, Any] = Field(default_factory=dict)
    skippedItems: List[str] = Field(default_factory=list)
    updatedEntities: List[MatchedItem] = Field(default_factory=list)
    outOfOrderMatches: List[MatchedItem] = Field(default_factory=list)
    allMatches: List[MatchedItem] = Field(default_factory=list)
    disambiguationValues: Dict[str, List[Any]] = Field(default_factory=dict)
    userInput: Optional[str] = None
    enumValues: List[Any] = Field(default_factory=list)
    useFullEntityMatches: bool = False
    editFormMode: bool = False
    customProperties: Dict[str, Any] = Field(default_factory=dict)
    shouldPromptCache: Dict[str, bool] = Field(default_factory=dict)


class EntityResolutionRequest(_WireModel):
    """Resolution request sent by the dialog engine for one turn."""
    botId: Optional[str] = None
    platformVersion: Optional[str] = None
    variableName: str
    context: RequestContext
    entityResolutionStatus: EntityResolutionStatusModel
    events: List[EntityEventModel] = Field(default_factory=list)
    candidateMessages: Optional[List[Any]] = None
    taskFlow: Optional[Any] = None


# Status fields the engine mutates in place; written back with defaults
_MUTABLE_STATUS_DEFAULTS = {
    "validationErrors": dict,
    "skippedItems": list,
    "disambiguationValues": dict,
    "customProperties": dict,
    "shouldPromptCache": dict,
    "updatedEntities": list,
    "outOfOrderMatches": list,
    "allMatches": list,
    "enumValues": list,
}


def validate_request(request: Any) -> EntityResolutionRequest:
    """
    Assert the resolution request contract.

    On success, missing status collections are written back into the raw
    status dict so later in-place mutation has something to mutate.

    Args:
        request: Raw request body (dict)

    Returns:
        Validated request model

    Raises:
        MalformedRequestError: If the request violates the schema
    """
    if not isinstance(request, dict):
        raise MalformedRequestError(
            errors=[{"loc": (), "msg": f"Request must be a dict, got {type(request).__name__}"}],
            request_body=request,
        )
    try:
        model = EntityResolutionRequest.model_validate(request)
    except ValidationError as e:
        raise MalformedRequestError(
            errors=e.errors(include_url=False, include_context=False),
            request_body=request,
        ) from e

    status = request["entityResolutionStatus"]
    for key, factory in _MUTABLE_STATUS_DEFAULTS.items():
        if status.get(key) is None:
            status[key] = factory()
    return model
