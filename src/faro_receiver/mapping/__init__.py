"""Internal mapping subpackage: payload items to ordered key-value records.

All functions within this package are pure (no I/O) and deterministic. The
public API is the top-level `mapper.py` facade; import from here only for
internal helpers.

Modules:
    flatten: One flatten function per telemetry item kind
    meta: Prefixed record of the shared payload Meta block
    time_utils: Wire timestamp parsing/rendering and UTC normalization

Design Invariants:
    - Every record starts with the `kind` key
    - Unordered maps are emitted in ascending key order, never in their own
      iteration order
    - Identical inputs always produce identical records
    - Timezone-aware UTC timestamps only
"""
from __future__ import annotations

from . import time_utils as time_utils  # noqa: F401

__all__ = ["time_utils"]
