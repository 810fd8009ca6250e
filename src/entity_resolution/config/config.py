"""
Entity Resolution Configuration

Centralized configuration for the composite bag resolution engine.
All settings can be overridden via environment variables.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env first, then .env.local (which can override)
_project_root = Path(__file__).resolve().parent.parent.parent.parent
_env_file = _project_root / ".env"
_env_local_file = _project_root / ".env.local"
if _env_file.exists():
    load_dotenv(_env_file, override=False)
if _env_local_file.exists():
    load_dotenv(_env_local_file, override=True)


class EntityResolutionConfig:
    """
    Central configuration for entity resolution.

    All settings have sensible defaults and can be overridden via environment variables.

    Example:
        >>> from entity_resolution.config import config
        >>> print(config.LOG_FORMAT)
        json

        # Override via environment:
        >>> os.environ["LOG_FORMAT"] = "pretty"
        >>> config = EntityResolutionConfig()  # Reload
        >>> print(config.LOG_FORMAT)
        pretty
    """

    # ========================================================================
    # Logging Settings
    # ========================================================================

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""

    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")
    """Log format: 'json' (structured) or 'pretty' (readable)"""

    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")
    """Optional: Write logs to file (e.g., '/var/log/entity-resolution/turns.log')"""

    LOG_EVENT_PROPERTIES: bool = os.getenv(
        "LOG_EVENT_PROPERTIES", "false").lower() == "true"
    """Include event properties in dispatcher debug logs (may contain user data)"""

    # ========================================================================
    # Display Settings
    # ========================================================================

    DATE_DISPLAY_FORMAT: str = os.getenv("DATE_DISPLAY_FORMAT", "%a %b %d %Y")
    """strftime format used by the default DATE display function"""

    DISPLAY_PROPERTIES_PATH: Optional[str] = os.getenv("DISPLAY_PROPERTIES_PATH")
    """Optional YAML file replacing the packaged system entity display table"""

    def __init__(self):
        """Re-read environment so a fresh instance reflects current overrides."""
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
        self.LOG_FILE = os.getenv("LOG_FILE")
        self.LOG_EVENT_PROPERTIES = os.getenv(
            "LOG_EVENT_PROPERTIES", "false").lower() == "true"
        self.DATE_DISPLAY_FORMAT = os.getenv("DATE_DISPLAY_FORMAT", "%a %b %d %Y")
        self.DISPLAY_PROPERTIES_PATH = os.getenv("DISPLAY_PROPERTIES_PATH")

    # ========================================================================
    # Helper Methods
    # ========================================================================

    @classmethod
    def from_env(cls):
        """
        Create config from environment variables.

        Returns:
            New EntityResolutionConfig instance with current environment values
        """
        return cls()

    def summary(self) -> str:
        """
        Get configuration summary as formatted string.

        Returns:
            Multi-line string with all config values
        """
        lines = [
            "=" * 60,
            "Entity Resolution Configuration",
            "=" * 60,
            "",
            "Logging:",
            f"  Level:              {self.LOG_LEVEL}",
            f"  Format:             {self.LOG_FORMAT}",
            f"  File:               {self.LOG_FILE or 'None'}",
            f"  Event Properties:   {'✅ Logged' if self.LOG_EVENT_PROPERTIES else '❌ Hidden'}",
            "",
            "Display:",
            f"  Date Format:        {self.DATE_DISPLAY_FORMAT}",
            f"  Display Table:      {self.DISPLAY_PROPERTIES_PATH or 'packaged default'}",
            "",
            "=" * 60,
        ]
        return "\n".join(lines)

    def __repr__(self):
        """String representation."""
        return f"<EntityResolutionConfig log_level={self.LOG_LEVEL} log_format={self.LOG_FORMAT}>"


# Global config instance
config = EntityResolutionConfig()
