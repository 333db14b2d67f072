"""Main CLI entry point for faro-receiver.

This module provides a command-line interface using Typer. It stands in for
the ingestion endpoint when working with payloads locally:
1.  Loading configuration (environment, `.env`, command-line overrides).
2.  Reading payload documents from files or stdin.
3.  Decoding each payload, keeping valid items when others are malformed
    (faro_receiver.decoder).
4.  Flattening every item to an ordered record (faro_receiver.mapper).
5.  Writing one logfmt or JSON line per record to stdout; failures go to
    stderr.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import find_dotenv, load_dotenv

from .config import OUTPUT_FORMATS, get_settings
from .decoder import DecodeResult, decode_payload
from .encoding.logfmt import encode_records
from .errors import ParseError
from .mapper import flatten_payload

app = typer.Typer(help="Frontend telemetry payload decoder and flattener")

logger = logging.getLogger(__name__)


def _read_source(path: str) -> bytes:
    if path == "-":
        return typer.get_binary_stream("stdin").read()
    return Path(path).read_bytes()


def _decode_source(path: str) -> Optional[DecodeResult]:
    """Read and decode one source, reporting payload-fatal failures.

    Returns None when the source could not be read or decoded at all.
    """
    try:
        raw = _read_source(path)
    except OSError as e:
        logger.error("Failed reading %s: %s", path, e)
        typer.echo(f"{path}: {e}", err=True)
        return None
    try:
        result = decode_payload(raw)
    except ParseError as e:
        logger.error("Rejected payload %s: %s", path, e)
        typer.echo(f"{path}: payload rejected: {e}", err=True)
        return None
    for item_error in result.errors:
        typer.echo(f"{path}: {item_error}", err=True)
    return result


@app.callback()
def main() -> None:
    """faro-receiver CLI.

    Use a subcommand like 'flatten' to process payloads.
    """
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    if settings.DEBUG:
        logging.getLogger("faro_receiver").setLevel(logging.DEBUG)


@app.command(help="Decode payloads and write one flattened record per line.")
def flatten(
    paths: List[str] = typer.Argument(..., help="Payload JSON files ('-' reads stdin)"),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        help="Record line format: logfmt or json. If not specified, uses OUTPUT_FORMAT from config/env.",
    ),
    include_meta: Optional[bool] = typer.Option(
        None,
        "--include-meta/--no-include-meta",
        help="Merge prefixed payload meta fields into every record. If not specified, uses INCLUDE_META.",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Exit with status 1 when any item was dropped. If not specified, uses STRICT.",
    ),
) -> None:
    """Flatten every item of every payload given.

    A payload that cannot be decoded at all is reported and skipped; the exit
    status is 1 if that happened, or if items were dropped in strict mode.
    """
    settings = get_settings()
    fmt = (output_format or settings.OUTPUT_FORMAT).strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"must be one of {', '.join(OUTPUT_FORMATS)}", param_hint="--format"
        )
    effective_meta = settings.INCLUDE_META if include_meta is None else include_meta
    effective_strict = settings.STRICT if strict is None else strict

    failed = False
    count = 0
    for path in paths:
        result = _decode_source(path)
        if result is None:
            failed = True
            continue
        if result.errors and effective_strict:
            failed = True
        records = flatten_payload(result.payload, include_meta=effective_meta)
        typer.echo(encode_records(records, fmt), nl=False)
        count += len(records)
    logger.info("Wrote %d record(s) from %d payload(s)", count, len(paths))
    if failed:
        raise typer.Exit(code=1)


@app.command(help="Decode payloads and report item counts without flattening.")
def validate(
    paths: List[str] = typer.Argument(..., help="Payload JSON files ('-' reads stdin)"),
) -> None:
    failed = False
    for path in paths:
        result = _decode_source(path)
        if result is None:
            failed = True
            continue
        payload = result.payload
        typer.echo(
            f"{path}: exceptions={len(payload.exceptions)} logs={len(payload.logs)} "
            f"events={len(payload.events)} measurements={len(payload.measurements)} "
            f"dropped={len(result.errors)}"
        )
        if result.errors:
            failed = True
    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
