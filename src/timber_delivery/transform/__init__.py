"""
Package: transform
Description: Event-to-wire-format transformation for the Timber API.
"""

from .wire_format import SCHEMA_URL, InputRecord, WireRecord, format_timestamp, transform

__all__ = [
    "SCHEMA_URL",
    "InputRecord",
    "WireRecord",
    "format_timestamp",
    "transform",
]
