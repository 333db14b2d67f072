"""Frontend telemetry payload model and record flattening.

Typical use::

    from faro_receiver import decode_payload, flatten_payload

    result = decode_payload(raw_bytes)
    for record in flatten_payload(result.payload):
        ...
"""
from __future__ import annotations

from .decoder import DecodeResult, decode_payload
from .errors import ItemError, ParseError, PayloadError, ValidationError
from .mapper import flatten_item, flatten_payload
from .ordered_map import OrderedMap

__all__ = [
    "DecodeResult",
    "decode_payload",
    "ItemError",
    "ParseError",
    "PayloadError",
    "ValidationError",
    "flatten_item",
    "flatten_payload",
    "OrderedMap",
]
