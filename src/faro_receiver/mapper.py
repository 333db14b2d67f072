"""Public facade for flattening telemetry items into ordered records.

All per-kind logic lives in `faro_receiver.mapping.flatten`; this module
dispatches on the item type and walks whole payloads.

Public Functions:
    flatten_item: Flatten one exception, log, event or measurement
    iter_items: Yield a payload's items in record order
    flatten_payload: Flatten every item of a payload, optionally with Meta
"""
from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Type, Union

from .mapping.flatten import (
    flatten_event,
    flatten_exception,
    flatten_log,
    flatten_measurement,
)
from .mapping.meta import flatten_meta
from .models.payload import Event, ExceptionItem, Log, Measurement, Payload
from .ordered_map import OrderedMap

__all__ = ["TelemetryItem", "flatten_item", "iter_items", "flatten_payload", "flatten_meta"]

TelemetryItem = Union[ExceptionItem, Log, Event, Measurement]

_FLATTENERS: Dict[Type, Callable[..., OrderedMap]] = {
    ExceptionItem: flatten_exception,
    Log: flatten_log,
    Event: flatten_event,
    Measurement: flatten_measurement,
}


def flatten_item(item: TelemetryItem) -> OrderedMap:
    """Convert one telemetry item into its ordered record.

    Raises:
        TypeError: If `item` is not one of the four item models.
    """
    flatten = _FLATTENERS.get(type(item))
    if flatten is None:
        raise TypeError(f"cannot flatten {type(item).__name__}")
    return flatten(item)


def iter_items(payload: Payload) -> Iterator[TelemetryItem]:
    """Yield exceptions, then logs, events and measurements, each in payload order."""
    yield from payload.exceptions
    yield from payload.logs
    yield from payload.events
    yield from payload.measurements


def flatten_payload(payload: Payload, *, include_meta: bool = False) -> List[OrderedMap]:
    """Flatten every item of `payload`.

    Args:
        payload: Decoded payload
        include_meta: When True, the prefixed Meta record is merged after each
            item's own keys

    Returns:
        One record per item, in `iter_items` order
    """
    meta_kv = flatten_meta(payload.meta) if include_meta else None
    records = []
    for item in iter_items(payload):
        kv = flatten_item(item)
        if meta_kv is not None:
            kv.merge(meta_kv)
        records.append(kv)
    return records
