"""Wire timestamp parsing and rendering with UTC enforcement.

Payload timestamps use one fixed format: ISO-8601 with exactly three
fractional digits and a literal `Z` suffix, e.g. `2021-09-30T10:46:17.680Z`.

Public Functions:
    parse_timestamp: Parse a wire timestamp into a timezone-aware UTC datetime
    format_timestamp: Render a datetime back into the wire format
    ensure_utc: Normalize a datetime to timezone-aware UTC

Design Invariant:
    All datetimes held by payload models are timezone-aware UTC. Naive
    datetimes are interpreted as UTC and tagged on the way in. Tests scan the
    codebase for datetime.utcnow() usage and fail if found.  # allow-naive-datetime
"""
from __future__ import annotations

import re
from datetime import datetime, timezone

__all__ = ["TIMESTAMP_FORMAT", "parse_timestamp", "format_timestamp", "ensure_utc"]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse `YYYY-MM-DDTHH:MM:SS.sssZ` into a UTC-aware datetime.

    Args:
        value: Wire timestamp string

    Returns:
        Timezone-aware datetime in UTC with millisecond precision

    Raises:
        ValueError: If the string does not match the wire format exactly or
            names an impossible date/time.
    """
    if not _TIMESTAMP_RE.match(value):
        raise ValueError(f"timestamp {value!r} does not match YYYY-MM-DDTHH:MM:SS.sssZ")
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as `YYYY-MM-DDTHH:MM:SS.sssZ` in UTC.

    Sub-millisecond precision is truncated, so values produced by
    `parse_timestamp` render back to their original string.
    """
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
