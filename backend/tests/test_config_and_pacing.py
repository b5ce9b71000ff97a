"""Unit tests for enricher settings validation and randomized pacing."""
from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from enricher.config import EnricherSettings
from enricher.rate_limiter import RandomDelay

from conftest import RecordedSleep


# ── EnricherSettings ────────────────────────────────────────────────────

def test_defaults() -> None:
    s = EnricherSettings()
    assert s.navigation_timeout_s is None
    assert s.index_delay == (1.0, 2.0)
    assert s.detail_delay == (1.0, 2.0)
    assert s.fixture_delay == (2.0, 5.0)


def test_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FE_ENRICHER_NAVIGATION_TIMEOUT_S", "45")
    monkeypatch.setenv("FE_ENRICHER_FIXTURE_DELAY_MAX_S", "9")
    s = EnricherSettings()
    assert s.navigation_timeout_s == 45.0
    assert s.fixture_delay == (2.0, 9.0)


def test_inverted_delay_bounds_rejected() -> None:
    with pytest.raises(ValidationError):
        EnricherSettings(detail_delay_min_s=3.0, detail_delay_max_s=1.0)


# ── RandomDelay ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delay_within_bounds() -> None:
    sleep = RecordedSleep()
    delay = RandomDelay(rng=random.Random(1), sleep=sleep)
    for _ in range(50):
        await delay.delay_between(2.0, 5.0)
    assert all(2.0 <= s <= 5.0 for s in sleep.calls)
    assert len(set(sleep.calls)) > 1


@pytest.mark.asyncio
async def test_fixed_delay_when_bounds_equal() -> None:
    sleep = RecordedSleep()
    await RandomDelay(sleep=sleep).delay_between(1.5, 1.5)
    assert sleep.calls == [1.5]


def test_inverted_bounds_raise() -> None:
    with pytest.raises(ValueError):
        RandomDelay().pick(5.0, 2.0)
