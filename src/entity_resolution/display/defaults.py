"""
System entity display defaults.

Loads the display property table from system_entity_display.yaml and binds
the named formatter functions. Every caller gets its own copy of the table,
so overrides made for one resolution never leak into another.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..config import config
from ..data_types import DisplayFunction, DisplayProperty, DisplayPropertyTable

_DEFAULT_TABLE_PATH = Path(__file__).resolve().parent.parent / "config" / "system_entity_display.yaml"

# Cache of parsed YAML tables keyed by file path
_TABLE_CACHE: Dict[str, Dict[str, Any]] = {}


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a system entity date.

    Accepts epoch milliseconds (int, float or digit string) and ISO 8601
    strings. Epoch values are interpreted in UTC.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def format_date(date: Any) -> str:
    """Render a date like 'Tue Jan 02 2024' (config.DATE_DISPLAY_FORMAT)."""
    parsed = parse_date(date)
    if parsed is None:
        return "" if date is None else str(date)
    return parsed.strftime(config.DATE_DISPLAY_FORMAT)


def format_date_range(start_date: Any, end_date: Any) -> str:
    return f"{format_date(start_date)} - {format_date(end_date)}"


def format_coordinates(latitude: Any, longitude: Any) -> str:
    return f"{latitude}, {longitude}"


DISPLAY_FUNCTIONS: Dict[str, DisplayFunction] = {
    "date": format_date,
    "date_range": format_date_range,
    "coordinates": format_coordinates,
}


def _load_table(path: Path) -> Dict[str, Any]:
    key = str(path)
    if key not in _TABLE_CACHE:
        with open(path, "r", encoding="utf-8") as f:
            _TABLE_CACHE[key] = yaml.safe_load(f) or {}
    return _TABLE_CACHE[key]


def load_display_properties(path: Optional[str] = None) -> DisplayPropertyTable:
    """
    Build a fresh display property table.

    Args:
        path: Optional YAML file; defaults to config.DISPLAY_PROPERTIES_PATH,
            then to the packaged table

    Returns:
        New table, safe to mutate

    Raises:
        ValueError: If an entry names an unknown formatter function
    """
    table_path = Path(path or config.DISPLAY_PROPERTIES_PATH or _DEFAULT_TABLE_PATH)
    table: DisplayPropertyTable = {}
    for entity_key, entry in _load_table(table_path).items():
        function_name = (entry or {}).get("function")
        function = None
        if function_name:
            if function_name not in DISPLAY_FUNCTIONS:
                raise ValueError(f"Unknown display function '{function_name}' for {entity_key}")
            function = DISPLAY_FUNCTIONS[function_name]
        table[entity_key] = DisplayProperty(
            properties=list((entry or {}).get("properties") or []),
            function=function,
        )
    return table
