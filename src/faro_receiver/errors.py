"""Error types raised while decoding frontend telemetry payloads.

Two kinds of failure are distinguished:

- `ParseError`: the document (or a part of it) has the wrong structure, e.g.
  malformed JSON, a string where a number is expected, a missing required
  field, or a timestamp that does not match the wire format.
- `ValidationError`: the structure is fine but a value is outside its allowed
  set, e.g. an unknown log level.

Errors that concern a single telemetry item are wrapped in `ItemError` so the
caller can report which item failed while keeping every other item.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = ["PayloadError", "ParseError", "ValidationError", "ItemError"]


class PayloadError(Exception):
    """Base class for payload decode failures."""

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ParseError(PayloadError):
    """Malformed JSON or a structurally incompatible field."""


class ValidationError(PayloadError):
    """Structurally valid but semantically invalid value."""


@dataclass(frozen=True)
class ItemError:
    """A decode failure confined to one telemetry item.

    `kind` is the item kind (`exception`, `log`, `event`, `measurement`) and
    `index` its position in the payload's sequence for that kind.
    """

    kind: str
    index: int
    error: PayloadError

    def __str__(self) -> str:
        return f"{self.kind}[{self.index}]: {self.error}"
