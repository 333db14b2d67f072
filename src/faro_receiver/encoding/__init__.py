"""Record encoders for line-oriented sinks."""
from __future__ import annotations

from .logfmt import encode_records, format_value, to_json_line, to_logfmt

__all__ = ["encode_records", "format_value", "to_json_line", "to_logfmt"]
