"""Tests for primary provider suspension state."""

import pytest

from websearch.health import HealthStatus, ProviderHealthState


@pytest.fixture
def health(fake_clock):
    return ProviderHealthState(base_duration_seconds=1200, max_multiplier=6, clock=fake_clock)


class TestProviderHealthState:
    """Test the suspension state machine."""

    def test_starts_healthy(self, health):
        assert health.status() is HealthStatus.HEALTHY
        assert health.is_suspended() is False
        assert health.remaining() == 0
        assert health.consecutive_suspensions == 0

    def test_backoff_sequence(self, health):
        durations = [health.record_failure() for _ in range(5)]

        assert durations == [1200, 2400, 4800, 7200, 7200]
        assert health.consecutive_suspensions == 5

    def test_backoff_multiplier(self, health):
        assert [health.backoff_multiplier(n) for n in range(1, 6)] == [1, 2, 4, 6, 6]

    def test_suspension_expires(self, health, fake_clock):
        health.record_failure()

        fake_clock.advance(1199)
        assert health.is_suspended() is True
        assert health.remaining() == pytest.approx(1)

        fake_clock.advance(1)
        assert health.is_suspended() is False
        assert health.status() is HealthStatus.HEALTHY

    def test_success_resets_backoff(self, health, fake_clock):
        health.record_failure()
        health.record_failure()
        fake_clock.advance(3600)

        health.record_success()

        assert health.consecutive_suspensions == 0
        assert health.record_failure() == 1200

    def test_success_keeps_suspension_deadline(self, health):
        health.record_failure()
        until = health.suspended_until

        health.record_success()

        assert health.suspended_until == until
        assert health.is_suspended() is True

    def test_deadline_never_moves_backward(self, health, fake_clock):
        for _ in range(3):
            health.record_failure()
        long_deadline = health.suspended_until
        assert long_deadline == fake_clock.now + 4800

        health.record_success()
        health.record_failure()

        assert health.suspended_until == long_deadline

    def test_snapshot(self, health, fake_clock):
        health.record_failure()
        fake_clock.advance(200)

        snapshot = health.snapshot()

        assert snapshot.status is HealthStatus.SUSPENDED
        assert snapshot.consecutive_suspensions == 1
        assert snapshot.remaining_seconds == pytest.approx(1000)
        assert str(snapshot.status) == "suspended"

    def test_reset(self, health):
        health.record_failure()

        health.reset()

        assert health.is_suspended() is False
        assert health.consecutive_suspensions == 0
