"""Shared test fixtures for Wellday advisor tests."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ADVISOR_SEED", raising=False)
    monkeypatch.delenv("DEFAULT_DAILY_BUDGET", raising=False)
    monkeypatch.delenv("WELLDAY_HOST", raising=False)
    monkeypatch.delenv("WELLDAY_ALLOW_INSECURE_BIND", raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))


# ---------------------------------------------------------------------------
# Deterministic random sources
# ---------------------------------------------------------------------------

def _first(candidates: Sequence[str]) -> str:
    return candidates[0]


def _last(candidates: Sequence[str]) -> str:
    return candidates[-1]


@pytest.fixture
def first_pick():
    """Picker that always returns the first candidate."""
    return _first


@pytest.fixture
def last_pick():
    """Picker that always returns the last candidate."""
    return _last


@pytest.fixture
def today() -> date:
    return date(2026, 3, 15)
