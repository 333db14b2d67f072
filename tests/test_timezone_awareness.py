from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from faro_receiver.mapper import flatten_item
from faro_receiver.mapping.time_utils import format_timestamp, parse_timestamp
from faro_receiver.models.payload import Log, LogLevel

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
TESTS_DIR = Path(__file__).resolve().parent  # current tests directory


def test_no_naive_datetime_patterns():
    """Ensure the codebase does not use deprecated/naive UTC constructors.

    We forbid `datetime.utcnow(` entirely and bare `datetime.now()` without a timezone argument.
    Allow: datetime.now(timezone.utc) or datetime.now(tz=timezone.utc).
    """
    forbidden = []
    this_file = Path(__file__).resolve()
    for base in (SRC_DIR, TESTS_DIR):
        for py_file in base.rglob("*.py"):
            if py_file.resolve() == this_file:
                continue
            for i, line in enumerate(py_file.read_text(encoding="utf-8").splitlines(), start=1):
                stripped = line.strip()
                if stripped.startswith("#") or stripped.startswith("\""):
                    continue
                if "allow-naive-datetime" in stripped:
                    continue
                if "datetime.utcnow(" in stripped:
                    forbidden.append((py_file, i, stripped))
                for m in re.finditer(r"datetime\.now\(([^)]*)\)", stripped):
                    inner = m.group(1).strip()
                    if not inner or ("timezone.utc" not in inner and "tz=" not in inner):
                        forbidden.append((py_file, i, stripped))
    assert not forbidden, "Found naive datetime usages:\n" + "\n".join(
        f"{p}:{ln}: {snippet}" for p, ln, snippet in forbidden
    )


def test_parse_and_format_round_trip():
    dt = parse_timestamp("2021-09-30T10:46:17.680Z")
    assert dt == datetime(2021, 9, 30, 10, 46, 17, 680000, tzinfo=timezone.utc)
    assert format_timestamp(dt) == "2021-09-30T10:46:17.680Z"


@pytest.mark.parametrize(
    "value",
    [
        "2021-09-30T10:46:17Z",
        "2021-09-30T10:46:17.68Z",
        "2021-09-30T10:46:17.680+00:00",
        "2021-09-30T10:46:17.680",
        "2021-02-30T10:46:17.680Z",
        "",
    ],
)
def test_parse_rejects_non_conforming(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_naive_and_offset_datetimes_are_normalized_to_utc():
    naive = datetime(2024, 1, 1, 12, 0, 0, 5000)  # allow-naive-datetime
    log = Log(level=LogLevel.INFO, timestamp=naive)
    assert log.timestamp.tzinfo is not None
    assert flatten_item(log).get("timestamp") == "2024-01-01T12:00:00.005Z"

    plus_two = timezone(timedelta(hours=2))
    log = Log(level=LogLevel.INFO, timestamp=datetime(2024, 1, 1, 14, 0, tzinfo=plus_two))
    assert flatten_item(log).get("timestamp") == "2024-01-01T12:00:00.000Z"
