"""
Configuration for entity resolution.

Exposes the env-driven settings object and the protocol constants.
"""

from .config import config, EntityResolutionConfig
from . import core

__all__ = ["config", "EntityResolutionConfig", "core"]
