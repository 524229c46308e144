"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest

from trade_intel.config import clear_settings_cache


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from the process environment and cached settings."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for windowed calculations."""
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def exchange_address() -> str:
    """A known Binance hot wallet."""
    return "0x3f5ce5fbfe3e9af3971dd833d26ba9b5c936f0be"
