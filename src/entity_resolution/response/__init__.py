"""
Response Builder Module

Builds the response object of a resolution turn.
"""

from .builder import build_response

__all__ = ["build_response"]
