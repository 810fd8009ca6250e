"""
Context Module

Objects handed to event handlers during a resolution turn.
"""

from .base_context import BaseContext
from .resolution_context import ResolutionContext

__all__ = ["BaseContext", "ResolutionContext"]
