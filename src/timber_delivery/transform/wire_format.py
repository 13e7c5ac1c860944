"""
Module: wire_format.py
Description: Reshape a structured log record into the Timber wire format.

The Timber ingestion API expects each log line to follow the Timber log
event JSON schema. A record produced by the host framework is mapped as
follows:

- "timber" (pre-shaped schema fragment) is merged at the top level first
- "@timestamp" becomes "dt" (ISO 8601, UTC, millisecond precision)
- "host" becomes "context.system.hostname"
- "message" stays "message"
- everything else is collected under "meta"

Every step only sets a key when it is absent, so a pre-shaped "timber"
fragment always wins over the plain fields.
"""

import copy
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

InputRecord = Mapping[str, Any]
WireRecord = Dict[str, Any]

SCHEMA_KEY = "$schema"
SCHEMA_URL = "https://raw.githubusercontent.com/timberio/log-event-json-schema/v3.1.1/schema.json"

TIMBER_FIELD = "timber"
TIMESTAMP_FIELD = "@timestamp"
VERSION_FIELD = "@version"
HOST_FIELD = "host"
MESSAGE_FIELD = "message"

CONSUMED_FIELDS = (VERSION_FIELD, TIMBER_FIELD, TIMESTAMP_FIELD, HOST_FIELD, MESSAGE_FIELD)


def transform(record: InputRecord) -> WireRecord:
    """
    Convert one input record into a Timber wire record.

    Never raises and never mutates the input; malformed optional fields
    are skipped.

    Args:
        record: Structured log record from the host framework

    Returns:
        New mapping ready for JSON serialization
    """
    wire: WireRecord = {SCHEMA_KEY: SCHEMA_URL}

    fragment = record.get(TIMBER_FIELD)
    if isinstance(fragment, Mapping):
        for key, value in fragment.items():
            if key not in wire:
                wire[key] = copy.deepcopy(value)

    if TIMESTAMP_FIELD in record and "dt" not in wire:
        dt = format_timestamp(record[TIMESTAMP_FIELD])
        if dt is not None:
            wire["dt"] = dt

    if HOST_FIELD in record:
        _set_hostname(wire, record[HOST_FIELD])

    if MESSAGE_FIELD in record and MESSAGE_FIELD not in wire:
        wire[MESSAGE_FIELD] = record[MESSAGE_FIELD]

    remainder = {
        key: copy.deepcopy(value)
        for key, value in record.items()
        if key not in CONSUMED_FIELDS
    }
    if remainder:
        meta = wire.get("meta")
        if meta is None:
            wire["meta"] = remainder
        elif isinstance(meta, dict):
            for key, value in remainder.items():
                if key not in meta:
                    meta[key] = value

    return wire


def format_timestamp(value: Any) -> Optional[str]:
    """
    Format a timestamp as an ISO 8601 UTC string, e.g. 2017-01-01T00:00:00.000Z.

    Accepts datetimes (naive values are taken as UTC), epoch seconds and
    ISO 8601 strings. Returns None for anything else.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            moment = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    try:
        moment = moment.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # Shifting to UTC leaves the supported date range
        return None

    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f".{moment.microsecond // 1000:03d}Z"
    )


def _set_hostname(wire: WireRecord, hostname: Any) -> None:
    """Set context.system.hostname unless present or blocked by a non-mapping."""
    node = wire
    for key in ("context", "system"):
        child = node.get(key)
        if child is None:
            child = {}
            node[key] = child
        elif not isinstance(child, dict):
            return
        node = child

    if "hostname" not in node:
        node["hostname"] = hostname
