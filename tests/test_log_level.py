from __future__ import annotations

import pytest

from faro_receiver.decoder import decode_item
from faro_receiver.errors import ValidationError
from faro_receiver.models.payload import Log, LogLevel


def test_levels_are_ordered_by_severity():
    ordered = [LogLevel.TRACE, LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]
    assert sorted(reversed(ordered)) == ordered
    assert LogLevel.TRACE < LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR
    assert LogLevel.ERROR >= LogLevel.WARN
    assert LogLevel.INFO <= LogLevel.INFO
    assert min(ordered) is LogLevel.TRACE
    # lexicographic order of the names would put "debug" before "trace"
    assert LogLevel.DEBUG > LogLevel.TRACE


def test_parse_known_levels():
    for name in ("trace", "debug", "info", "warn", "error"):
        level = LogLevel.parse(name)
        assert level.value == name
        assert str(level) == name


def test_parse_unknown_level_fails_loudly():
    with pytest.raises(ValidationError) as info:
        LogLevel.parse("critical")
    assert info.value.field == "level"
    assert info.value.value == "critical"


def test_trace_decodes_to_lowest_severity():
    log = decode_item(Log, {"level": "trace", "timestamp": "2021-09-30T10:46:17.680Z"})
    assert log.level is LogLevel.TRACE
    assert log.level.severity == 0
    assert all(log.level <= other for other in LogLevel)
