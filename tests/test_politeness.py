"""Tests for the politeness scheduler."""

import asyncio
import random
from unittest.mock import MagicMock

import pytest

from websearch.politeness import BASE_HEADERS, USER_AGENTS, PolitenessScheduler


def _scheduler(clock, **kwargs) -> PolitenessScheduler:
    options = {"min_delay_seconds": 0, "max_jitter_seconds": 0}
    options.update(kwargs)
    return PolitenessScheduler(clock=clock, sleep=clock.sleep, **options)


class TestAcquire:
    """Test request pacing."""

    @pytest.mark.asyncio
    async def test_first_request_not_delayed(self, fake_clock):
        scheduler = _scheduler(fake_clock, min_delay_seconds=2)

        waited = await scheduler.acquire()

        assert waited == 0
        assert fake_clock.sleeps == []
        assert scheduler.state.request_count == 1

    @pytest.mark.asyncio
    async def test_minimum_gap(self, fake_clock):
        scheduler = _scheduler(fake_clock, min_delay_seconds=2)

        await scheduler.acquire()
        fake_clock.advance(0.5)
        waited = await scheduler.acquire()

        assert waited == pytest.approx(1.5)
        assert fake_clock.sleeps == [pytest.approx(1.5)]

    @pytest.mark.asyncio
    async def test_no_gap_needed_after_idle(self, fake_clock):
        scheduler = _scheduler(fake_clock, min_delay_seconds=2)

        await scheduler.acquire()
        fake_clock.advance(10)
        waited = await scheduler.acquire()

        assert waited == 0

    @pytest.mark.asyncio
    async def test_full_window_waits_for_oldest_plus_margin(self, fake_clock):
        scheduler = _scheduler(fake_clock, max_requests=3, window_seconds=60)

        for _ in range(3):
            await scheduler.acquire()
        waited = await scheduler.acquire()

        assert waited == pytest.approx(61)
        assert fake_clock.sleeps == [pytest.approx(61)]
        assert list(scheduler.state.recent_requests) == [pytest.approx(1061)]

    @pytest.mark.asyncio
    async def test_window_never_exceeded(self, fake_clock):
        scheduler = _scheduler(fake_clock, max_requests=3, window_seconds=60, min_delay_seconds=1)
        issued = []

        for step in (0, 5, 5, 20, 0, 40, 1, 0):
            fake_clock.advance(step)
            await scheduler.acquire()
            issued.append(scheduler.state.last_request_at)

        for i in range(len(issued) - 3):
            assert issued[i + 3] - issued[i] > 60

    @pytest.mark.asyncio
    async def test_jitter_bounds(self, fake_clock):
        scheduler = _scheduler(fake_clock, max_jitter_seconds=3, rng=random.Random(7))

        for _ in range(20):
            waited = await scheduler.acquire()
            assert 0 <= waited <= 3

    @pytest.mark.asyncio
    async def test_concurrent_callers_are_spaced(self, fake_clock):
        scheduler = _scheduler(fake_clock, min_delay_seconds=2)
        issued = []

        async def request():
            await scheduler.acquire()
            issued.append(scheduler.state.last_request_at)

        await asyncio.gather(*(request() for _ in range(4)))

        assert len(issued) == 4
        gaps = [b - a for a, b in zip(issued, issued[1:])]
        assert all(gap >= 2 for gap in gaps)
        assert scheduler.state.request_count == 4

    def test_rejects_empty_window(self, fake_clock):
        with pytest.raises(ValueError):
            _scheduler(fake_clock, max_requests=0)


class TestIdentity:
    """Test identity rotation and headers."""

    @pytest.mark.asyncio
    async def test_identity_rotates_with_request_count(self, fake_clock):
        scheduler = _scheduler(fake_clock)
        seen = []

        for _ in range(len(USER_AGENTS) + 1):
            seen.append(scheduler.identity())
            await scheduler.acquire()

        assert seen[: len(USER_AGENTS)] == list(USER_AGENTS)
        assert seen[-1] == USER_AGENTS[0]

    def test_optional_headers_included(self, fake_clock):
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.0
        scheduler = _scheduler(fake_clock, rng=rng)

        headers = scheduler.supplementary_headers()

        assert headers["DNT"] == "1"
        assert headers["Cache-Control"] == "max-age=0"
        assert headers["Accept-Encoding"] == BASE_HEADERS["Accept-Encoding"]

    def test_optional_headers_omitted(self, fake_clock):
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.99
        scheduler = _scheduler(fake_clock, rng=rng)

        headers = scheduler.supplementary_headers()

        assert headers == BASE_HEADERS

    @pytest.mark.asyncio
    async def test_reset(self, fake_clock):
        scheduler = _scheduler(fake_clock)
        await scheduler.acquire()

        scheduler.reset()

        assert scheduler.state.request_count == 0
        assert scheduler.state.last_request_at is None
        assert scheduler.identity() == USER_AGENTS[0]
