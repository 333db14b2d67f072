"""Line encoders for flattened records.

Two output shapes are supported for line-oriented sinks:

- logfmt: `key=value` pairs separated by spaces, in record order
- JSON lines: one JSON object per record, keys in record order

Value rendering (shared by both where text is produced):
    str   -> as-is (logfmt quotes it when empty or containing spaces, `=`,
             `"` or control characters)
    bool  -> true / false
    float -> integral values without a fraction (`14`), otherwise `repr`
             (`22.12`)
"""
from __future__ import annotations

import json
import math
import re
from collections.abc import Iterable
from typing import Any

from ..ordered_map import OrderedMap

__all__ = ["format_value", "to_logfmt", "to_json_line", "encode_records"]

_NEEDS_QUOTES = re.compile(r'[\s="\\]|[\x00-\x1f]')
_BAD_KEY_CHARS = re.compile(r'[\s="]')


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def _logfmt_value(value: Any) -> str:
    text = format_value(value)
    if text == "" or _NEEDS_QUOTES.search(text):
        return json.dumps(text, ensure_ascii=False)
    return text


def to_logfmt(record: OrderedMap) -> str:
    """Render a record as a single logfmt line (no trailing newline).

    Characters that cannot appear in a logfmt key are replaced with `_`.
    """
    return " ".join(
        f"{_BAD_KEY_CHARS.sub('_', key)}={_logfmt_value(value)}" for key, value in record
    )


def to_json_line(record: OrderedMap) -> str:
    return json.dumps(dict(record.items()), ensure_ascii=False, allow_nan=False)


def encode_records(records: Iterable[OrderedMap], fmt: str = "logfmt") -> str:
    """Encode records one per line.

    Args:
        records: Flattened records
        fmt: `logfmt` or `json`

    Returns:
        Newline-terminated lines, or an empty string when there are no records.
    """
    if fmt == "logfmt":
        encode = to_logfmt
    elif fmt == "json":
        encode = to_json_line
    else:
        raise ValueError(f"unknown output format {fmt!r}")
    lines = [encode(record) for record in records]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
