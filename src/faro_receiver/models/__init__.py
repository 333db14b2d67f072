"""Typed payload models (see `faro_receiver.models.payload`)."""
from __future__ import annotations

from .payload import (
    SDK,
    App,
    Browser,
    Event,
    ExceptionItem,
    Frame,
    Log,
    LogLevel,
    Measurement,
    Meta,
    Page,
    Payload,
    Session,
    Stacktrace,
    TraceContext,
    User,
    View,
)

__all__ = [
    "SDK",
    "App",
    "Browser",
    "Event",
    "ExceptionItem",
    "Frame",
    "Log",
    "LogLevel",
    "Measurement",
    "Meta",
    "Page",
    "Payload",
    "Session",
    "Stacktrace",
    "TraceContext",
    "User",
    "View",
]
