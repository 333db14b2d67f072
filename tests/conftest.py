import sys
from pathlib import Path

import pytest

# Ensure `src` is on sys.path for tests when not installed editable.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

TESTDATA = Path(__file__).resolve().parent / "testdata"


@pytest.fixture
def payload_path() -> Path:
    return TESTDATA / "payload.json"


@pytest.fixture
def payload_bytes(payload_path: Path) -> bytes:
    content = payload_path.read_bytes()
    assert len(content) > 0
    return content
