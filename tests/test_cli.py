from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from faro_receiver import config as config_module
from faro_receiver.__main__ import app

runner = CliRunner()

_KEYS = ("LOG_LEVEL", "DEBUG", "OUTPUT_FORMAT", "INCLUDE_META", "STRICT")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


def _record_lines(output: str, prefix: str = "kind=") -> list[str]:
    return [line for line in output.splitlines() if line.startswith(prefix)]


def _write(tmp_path: Path, name: str, doc) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_flatten_writes_logfmt_records(payload_path):
    result = runner.invoke(app, ["flatten", str(payload_path)])
    assert result.exit_code == 0, result.output
    lines = _record_lines(result.stdout)
    assert len(lines) == 6
    assert lines[-1] == (
        "kind=measurement type=foobar ttfb=14 ttfcp=22.12 ttfp=20.12 traceID=abcd "
        "spanID=def context_hello=world value_ttfb=14 value_ttfcp=22.12 value_ttfp=20.12"
    )
    assert lines[1].startswith('kind=log message="opened pricing page" level=info ')


def test_flatten_json_format_with_meta(payload_path):
    result = runner.invoke(
        app, ["flatten", "--format", "json", "--include-meta", str(payload_path)]
    )
    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in _record_lines(result.stdout, prefix="{")]
    assert [r["kind"] for r in records] == [
        "exception",
        "log",
        "log",
        "event",
        "event",
        "measurement",
    ]
    assert list(records[-1])[:3] == ["kind", "type", "ttfb"]
    assert records[0]["app_name"] == "testapp"
    assert records[0]["browser_mobile"] is False


def test_flatten_uses_settings_when_flags_omitted(monkeypatch, payload_path):
    monkeypatch.setenv("OUTPUT_FORMAT", "json")
    result = runner.invoke(app, ["flatten", str(payload_path)])
    assert result.exit_code == 0, result.output
    assert len(_record_lines(result.stdout, prefix="{")) == 6


def test_flatten_reads_stdin(payload_bytes):
    result = runner.invoke(app, ["flatten", "-"], input=payload_bytes)
    assert result.exit_code == 0, result.output
    assert len(_record_lines(result.stdout)) == 6


def test_item_errors_keep_other_records(tmp_path):
    path = _write(
        tmp_path,
        "partial.json",
        {
            "meta": {},
            "logs": [
                {"message": "ok", "level": "info", "timestamp": "2024-01-01T00:00:00.000Z"},
                {"message": "bad", "level": "loud", "timestamp": "2024-01-01T00:00:00.000Z"},
            ],
        },
    )
    result = runner.invoke(app, ["flatten", str(path)])
    assert result.exit_code == 0, result.output
    assert _record_lines(result.stdout) == [
        "kind=log message=ok level=info timestamp=2024-01-01T00:00:00.000Z"
    ]
    assert "log[1]" in result.output

    strict = runner.invoke(app, ["flatten", "--strict", str(path)])
    assert strict.exit_code == 1
    assert len(_record_lines(strict.stdout)) == 1


def test_payload_fatal_error_sets_exit_code(tmp_path, payload_path):
    bad = _write(tmp_path, "nometa.json", {"logs": []})
    result = runner.invoke(app, ["flatten", str(bad), str(payload_path)])
    assert result.exit_code == 1
    assert "payload rejected" in result.output
    assert len(_record_lines(result.stdout)) == 6


def test_missing_file_is_reported(tmp_path):
    result = runner.invoke(app, ["flatten", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_unknown_format_is_rejected(payload_path):
    result = runner.invoke(app, ["flatten", "--format", "xml", str(payload_path)])
    assert result.exit_code == 2


def test_validate_reports_counts(payload_path, tmp_path):
    result = runner.invoke(app, ["validate", str(payload_path)])
    assert result.exit_code == 0, result.output
    assert "exceptions=1 logs=2 events=2 measurements=1 dropped=0" in result.stdout

    bad = _write(
        tmp_path,
        "bad.json",
        {"meta": {}, "events": [{"name": "x", "timestamp": "yesterday"}]},
    )
    result = runner.invoke(app, ["validate", str(bad)])
    assert result.exit_code == 1
    assert "events=0" in result.output
    assert "dropped=1" in result.output
