"""Pydantic models for frontend telemetry payloads.

These models describe the JSON document an instrumented browser application
submits: a shared `meta` block plus sequences of exceptions, logs, events and
measurements. Field names mirror the wire keys so `model_validate` can be fed
decoded JSON directly and `model_dump(mode="json")` reproduces the wire shape.

Decode rules applied by every model:
- Unknown keys are ignored.
- JSON `null` is treated like an absent key, so the field's default applies.
- Optional strings default to "" and nested objects to their zero value.
- Timestamps must match `YYYY-MM-DDTHH:MM:SS.sssZ` and are held as UTC.
- Sample values must be finite numbers.
- All models are frozen once validated. Freezing covers attribute
  assignment only: the dict and list containers held by a model are plain
  Python containers and must be treated as read-only. The flatteners never
  modify them.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    StrictBool,
    StrictInt,
    model_validator,
)

from ..errors import ValidationError
from ..mapping.time_utils import ensure_utc, format_timestamp, parse_timestamp

__all__ = [
    "Timestamp",
    "SDK",
    "App",
    "User",
    "Session",
    "Page",
    "Browser",
    "View",
    "Meta",
    "TraceContext",
    "Frame",
    "Stacktrace",
    "ExceptionItem",
    "LogLevel",
    "Log",
    "Event",
    "Measurement",
    "Payload",
]


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        return parse_timestamp(value)
    raise ValueError(f"timestamp must be a string, got {type(value).__name__}")


Timestamp = Annotated[
    datetime,
    BeforeValidator(_coerce_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]

# JSON has no NaN or Infinity; samples must be finite numbers.
SampleValue = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ---------------- Meta -----------------


class SDK(_PayloadModel):
    """Instrumentation SDK that produced the payload."""

    name: str = ""
    version: str = ""


class App(_PayloadModel):
    name: str = ""
    release: str = ""
    version: str = ""
    environment: str = ""


class User(_PayloadModel):
    username: str = ""
    id: str = ""
    email: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)


class Session(_PayloadModel):
    id: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)


class Page(_PayloadModel):
    url: str = ""


class Browser(_PayloadModel):
    """Client browser description. Viewport sizes arrive as strings."""

    name: str = ""
    version: str = ""
    os: str = ""
    mobile: StrictBool = False
    userAgent: str = ""
    language: str = ""
    viewportWidth: str = ""
    viewportHeight: str = ""


class View(_PayloadModel):
    name: str = ""


class Meta(_PayloadModel):
    """Context shared by every item of a payload."""

    sdk: SDK = Field(default_factory=SDK)
    app: App = Field(default_factory=App)
    user: User = Field(default_factory=User)
    session: Session = Field(default_factory=Session)
    page: Page = Field(default_factory=Page)
    browser: Browser = Field(default_factory=Browser)
    view: View = Field(default_factory=View)


# ---------------- Items -----------------


class TraceContext(_PayloadModel):
    """Distributed-trace correlation. Both ids empty means no trace."""

    trace_id: str = ""
    span_id: str = ""

    def is_zero(self) -> bool:
        return not self.trace_id and not self.span_id


class Frame(_PayloadModel):
    """One stack frame of a captured exception."""

    function: str = ""
    module: str = ""
    filename: str = ""
    lineno: StrictInt = 0
    colno: StrictInt = 0


class Stacktrace(_PayloadModel):
    frames: List[Frame] = Field(default_factory=list)


class ExceptionItem(_PayloadModel):
    """A client-side error with its stack trace and free-form context."""

    type: str = ""
    value: str = ""
    stacktrace: Stacktrace = Field(default_factory=Stacktrace)
    timestamp: Optional[Timestamp] = None
    trace: TraceContext = Field(default_factory=TraceContext)
    context: Dict[str, str] = Field(default_factory=dict)


class LogLevel(str, Enum):
    """Closed set of log levels, ordered by increasing severity."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """Return the level named `value`; unknown names are rejected."""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"unknown log level {value!r}", field="level", value=value
            ) from None

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {level: rank for rank, level in enumerate(LogLevel)}


class Log(_PayloadModel):
    message: str = ""
    level: LogLevel
    context: Dict[str, str] = Field(default_factory=dict)
    timestamp: Timestamp
    trace: TraceContext = Field(default_factory=TraceContext)


class Event(_PayloadModel):
    """An application-defined occurrence. `domain` is optional."""

    name: str = ""
    domain: str = ""
    timestamp: Timestamp
    attributes: Dict[str, str] = Field(default_factory=dict)
    trace: TraceContext = Field(default_factory=TraceContext)


class Measurement(_PayloadModel):
    """A named group of numeric samples, e.g. page-load timings."""

    type: str = ""
    values: Dict[str, SampleValue] = Field(default_factory=dict)
    timestamp: Timestamp
    trace: TraceContext = Field(default_factory=TraceContext)
    context: Dict[str, str] = Field(default_factory=dict)


class Payload(_PayloadModel):
    """One decoded telemetry submission.

    Validating a whole document through this model is all-or-nothing; use
    `faro_receiver.decoder.decode_payload` to keep valid items when some
    items are malformed.
    """

    meta: Meta
    exceptions: List[ExceptionItem] = Field(default_factory=list)
    logs: List[Log] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    measurements: List[Measurement] = Field(default_factory=list)
