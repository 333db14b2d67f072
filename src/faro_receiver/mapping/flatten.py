"""Per-kind flattening of telemetry items into ordered records.

Every record is built in the same order:

1. `kind`
2. the item's own scalar fields in a fixed per-kind order (empty strings are
   skipped, except a measurement's `type`, which is always present)
3. for measurements, one bare key per sample value, skipping names that
   would replace a reserved record key (`kind`, `type`, `traceID`, `spanID`)
4. `traceID`, `spanID` when the item carries a non-zero trace
5. context/attribute entries under a per-kind prefix
6. for measurements, every sample value again under `value_`

Unordered maps (values, context, attributes) are always emitted in ascending
key order. Python `str` ordering compares code points, which matches the
byte-wise order of the UTF-8 encoding.

Record layouts:
    measurement: kind, type, <values>, traceID, spanID, context_*, value_*
    log:         kind, message, level, timestamp, traceID, spanID, context_*
    event:       kind, event_name, event_domain, timestamp, traceID, spanID,
                 event_data_*
    exception:   kind, type, value, stacktrace, timestamp, traceID, spanID,
                 context_*
"""
from __future__ import annotations

from typing import Mapping

from ..models.payload import Event, ExceptionItem, Log, Measurement, TraceContext
from ..ordered_map import OrderedMap
from .time_utils import format_timestamp

__all__ = [
    "KIND_EXCEPTION",
    "KIND_LOG",
    "KIND_EVENT",
    "KIND_MEASUREMENT",
    "flatten_exception",
    "flatten_log",
    "flatten_event",
    "flatten_measurement",
    "render_stacktrace",
]

KIND_EXCEPTION = "exception"
KIND_LOG = "log"
KIND_EVENT = "event"
KIND_MEASUREMENT = "measurement"

CONTEXT_PREFIX = "context_"
EVENT_DATA_PREFIX = "event_data_"
VALUE_PREFIX = "value_"

RESERVED_KEYS = frozenset({"kind", "type", "traceID", "spanID"})


def _new_record(kind: str) -> OrderedMap:
    kv = OrderedMap()
    kv.set("kind", kind)
    return kv


def _add_str(kv: OrderedMap, key: str, value: str) -> None:
    if value:
        kv.set(key, value)


def _add_trace(kv: OrderedMap, trace: TraceContext) -> None:
    if trace.is_zero():
        return
    kv.set("traceID", trace.trace_id)
    kv.set("spanID", trace.span_id)


def _add_sorted(kv: OrderedMap, mapping: Mapping[str, object], prefix: str = "") -> None:
    kv.merge(OrderedMap.from_mapping(mapping), prefix=prefix)


def _add_bare_values(kv: OrderedMap, values: Mapping[str, float]) -> None:
    _add_sorted(kv, {k: v for k, v in values.items() if k not in RESERVED_KEYS})


def render_stacktrace(exc: ExceptionItem) -> str:
    """Render an exception as `Type: value` followed by one line per frame.

    Frames without a function name render as `?`.
    """
    lines = [f"{exc.type}: {exc.value}"]
    for frame in exc.stacktrace.frames:
        function = frame.function or "?"
        lines.append(f"  at {function} ({frame.filename}:{frame.lineno}:{frame.colno})")
    return "\n".join(lines)


def flatten_exception(exc: ExceptionItem) -> OrderedMap:
    kv = _new_record(KIND_EXCEPTION)
    _add_str(kv, "type", exc.type)
    _add_str(kv, "value", exc.value)
    if exc.stacktrace.frames:
        kv.set("stacktrace", render_stacktrace(exc))
    if exc.timestamp is not None:
        kv.set("timestamp", format_timestamp(exc.timestamp))
    _add_trace(kv, exc.trace)
    _add_sorted(kv, exc.context, CONTEXT_PREFIX)
    return kv


def flatten_log(log: Log) -> OrderedMap:
    kv = _new_record(KIND_LOG)
    _add_str(kv, "message", log.message)
    kv.set("level", log.level.value)
    kv.set("timestamp", format_timestamp(log.timestamp))
    _add_trace(kv, log.trace)
    _add_sorted(kv, log.context, CONTEXT_PREFIX)
    return kv


def flatten_event(event: Event) -> OrderedMap:
    kv = _new_record(KIND_EVENT)
    _add_str(kv, "event_name", event.name)
    _add_str(kv, "event_domain", event.domain)
    kv.set("timestamp", format_timestamp(event.timestamp))
    _add_trace(kv, event.trace)
    _add_sorted(kv, event.attributes, EVENT_DATA_PREFIX)
    return kv


def flatten_measurement(measurement: Measurement) -> OrderedMap:
    """Flatten a measurement; each sample appears bare and under `value_`.

    A sample named like a reserved key only appears under `value_`. The
    measurement timestamp is not part of the record.
    """
    values = {name: float(v) for name, v in measurement.values.items()}
    kv = _new_record(KIND_MEASUREMENT)
    kv.set("type", measurement.type)
    _add_bare_values(kv, values)
    _add_trace(kv, measurement.trace)
    _add_sorted(kv, measurement.context, CONTEXT_PREFIX)
    _add_sorted(kv, values, VALUE_PREFIX)
    return kv
