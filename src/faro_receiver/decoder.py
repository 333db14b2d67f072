"""Payload decoding with per-item failure isolation.

`decode_payload` turns a raw JSON document into a `Payload`. Failures are
split by blast radius:

- Payload-fatal (raise `ParseError`): malformed JSON, a document that is not
  an object, a missing or malformed `meta` block, or an item list that is not
  an array.
- Item-local (collected as `ItemError`): any single exception, log, event or
  measurement that fails validation. The item is dropped, a warning is
  logged and every other item is kept.

Pydantic validation errors are translated at this boundary: an out-of-set
enum value (unknown log level) becomes a `ValidationError`, everything else a
`ParseError`.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ItemError, ParseError, PayloadError, ValidationError
from .models.payload import Event, ExceptionItem, Log, Measurement, Meta, Payload

logger = logging.getLogger(__name__)

__all__ = ["DecodeResult", "decode_payload", "decode_item"]

ModelT = TypeVar("ModelT", bound=BaseModel)

# (payload key, item kind, model) in payload order.
ITEM_SEQUENCES: Tuple[Tuple[str, str, Type[BaseModel]], ...] = (
    ("exceptions", "exception", ExceptionItem),
    ("logs", "log", Log),
    ("events", "event", Event),
    ("measurements", "measurement", Measurement),
)


@dataclass
class DecodeResult:
    """A decoded payload plus the items that had to be dropped."""

    payload: Payload
    errors: List[ItemError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _loc(loc: Tuple[Union[int, str], ...], prefix: str = "") -> str:
    parts = [prefix] if prefix else []
    parts.extend(str(p) for p in loc)
    return ".".join(parts)


def _translate(exc: PydanticValidationError, prefix: str = "") -> PayloadError:
    errors = exc.errors()
    for err in errors:
        if err.get("type") == "enum":
            value = err.get("input")
            return ValidationError(
                f"invalid value {value!r}: {err.get('msg')}",
                field=_loc(err.get("loc", ()), prefix),
                value=value,
            )
    first = errors[0] if errors else {}
    return ParseError(
        str(first.get("msg", exc)),
        field=_loc(first.get("loc", ()), prefix) or None,
        value=first.get("input"),
    )


def decode_item(model: Type[ModelT], data: Any) -> ModelT:
    """Validate one item, raising `ParseError` or `ValidationError`."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise _translate(exc) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def _load_document(raw: Union[bytes, bytearray, str, Mapping[str, Any]]) -> Any:
    if isinstance(raw, (bytes, bytearray, str)):
        try:
            return json.loads(raw, parse_constant=_reject_constant)
        except ValueError as exc:
            raise ParseError(f"malformed JSON: {exc}") from exc
    return raw


def decode_payload(raw: Union[bytes, bytearray, str, Mapping[str, Any]]) -> DecodeResult:
    """Decode a payload document, isolating failures to individual items.

    Args:
        raw: JSON text/bytes, or an already-parsed mapping

    Returns:
        DecodeResult holding the payload with every valid item and one
        ItemError per dropped item

    Raises:
        ParseError: If the document as a whole cannot be used.
    """
    doc = _load_document(raw)
    if not isinstance(doc, Mapping):
        raise ParseError("payload must be a JSON object", value=type(doc).__name__)

    meta_raw = doc.get("meta")
    if meta_raw is None:
        raise ParseError("missing required object", field="meta")
    try:
        meta = Meta.model_validate(meta_raw)
    except PydanticValidationError as exc:
        translated = _translate(exc, prefix="meta")
        raise ParseError(translated.message, field=translated.field, value=translated.value) from exc

    sequences: dict[str, list[Any]] = {}
    errors: List[ItemError] = []
    for key, kind, model in ITEM_SEQUENCES:
        raw_items = doc.get(key)
        if raw_items is None:
            sequences[key] = []
            continue
        if not isinstance(raw_items, list):
            raise ParseError("expected an array", field=key, value=type(raw_items).__name__)
        decoded = []
        for index, raw_item in enumerate(raw_items):
            try:
                decoded.append(decode_item(model, raw_item))
            except PayloadError as err:
                logger.warning("Dropping %s[%d]: %s", kind, index, err)
                errors.append(ItemError(kind=kind, index=index, error=err))
        sequences[key] = decoded

    payload = Payload(meta=meta, **sequences)
    logger.debug(
        "Decoded payload exceptions=%d logs=%d events=%d measurements=%d dropped=%d",
        len(payload.exceptions),
        len(payload.logs),
        len(payload.events),
        len(payload.measurements),
        len(errors),
    )
    return DecodeResult(payload=payload, errors=errors)
