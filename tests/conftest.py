from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def which_all():
    """A ``which`` replacement that finds every executable."""

    return lambda command: f"/usr/bin/{command}"


@pytest.fixture()
def which_none():
    """A ``which`` replacement that finds nothing."""

    return lambda command: None
