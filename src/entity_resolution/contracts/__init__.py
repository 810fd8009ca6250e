from .request_schema import EntityResolutionRequest, validate_request

__all__ = ["EntityResolutionRequest", "validate_request"]
