"""
Display Value Module

Renders bag item values as text using per-entity-type display properties.
"""

from .formatter import DisplayValueFormatter
from .defaults import load_display_properties, format_date, parse_date

__all__ = ["DisplayValueFormatter", "load_display_properties", "format_date", "parse_date"]
