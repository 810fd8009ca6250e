from .exceptions import EntityResolutionError, MalformedRequestError, UnknownDisplayEntityError

__all__ = ["EntityResolutionError", "MalformedRequestError", "UnknownDisplayEntityError"]
