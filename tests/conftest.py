from __future__ import annotations

import sys
import time
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR / "src"))

from factories import BASE_URL  # noqa: E402


@pytest.fixture
def store_env(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.delenv("STORE_ENV", raising=False)
    monkeypatch.delenv("STORE_API_BASE_URL_DEV", raising=False)
    monkeypatch.setenv("STORE_API_BASE_URL", BASE_URL)
    return BASE_URL


@pytest.fixture
def utc_minus_five(monkeypatch: pytest.MonkeyPatch):
    """Pin the process local zone to a fixed UTC-5 offset with no DST."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "EST5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
