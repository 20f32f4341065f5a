"""Suspension state for the primary search provider.

A failing primary is suspended for an exponentially growing period. The
state is process-wide: one instance per primary provider, shared by every
request and guarded by a lock.
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from websearch.logging import get_logger

logger = get_logger("websearch.health")


class HealthStatus(str, Enum):
    """Health of a provider."""

    HEALTHY = "healthy"
    SUSPENDED = "suspended"

    def __str__(self) -> str:
        """String representation of the status."""
        return self.value


@dataclass(frozen=True)
class HealthSnapshot:
    """Point-in-time copy of the suspension state."""

    status: HealthStatus
    suspended_until: float
    consecutive_suspensions: int
    remaining_seconds: float


class ProviderHealthState:
    """Tracks suspension of the primary provider.

    ``suspended_until`` only moves forward, on a new suspension. A success
    resets ``consecutive_suspensions`` but leaves ``suspended_until`` alone.
    Leaving the suspended state is implicit once the clock passes
    ``suspended_until``.
    """

    def __init__(
        self,
        base_duration_seconds: float = 20 * 60,
        max_multiplier: int = 6,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize a healthy, never-suspended state.

        Args:
            base_duration_seconds: Suspension length after the first failure
            max_multiplier: Cap of the backoff multiplier
            clock: Wall clock in epoch seconds
        """
        self.base_duration_seconds = base_duration_seconds
        self.max_multiplier = max_multiplier
        self._clock = clock
        self._lock = threading.Lock()
        self.suspended_until: float = 0.0
        self.consecutive_suspensions: int = 0

    def status(self) -> HealthStatus:
        """Get the current health status."""
        with self._lock:
            return self._status(self._clock())

    def is_suspended(self) -> bool:
        """Check whether the provider must be skipped right now."""
        return self.status() is HealthStatus.SUSPENDED

    def remaining(self) -> float:
        """Get the seconds left in the current suspension (0 if healthy)."""
        with self._lock:
            return max(0.0, self.suspended_until - self._clock())

    def backoff_multiplier(self, suspensions: int) -> int:
        """Multiplier for the given suspension count: 1, 2, 4, ... capped."""
        return min(2 ** max(suspensions - 1, 0), self.max_multiplier)

    def record_failure(self) -> float:
        """Suspend the provider after a failed call.

        Returns:
            float: Suspension duration in seconds
        """
        with self._lock:
            now = self._clock()
            self.consecutive_suspensions += 1
            suspensions = self.consecutive_suspensions
            multiplier = self.backoff_multiplier(suspensions)
            duration = self.base_duration_seconds * multiplier
            self.suspended_until = max(self.suspended_until, now + duration)

        logger.warning(
            "Primary provider suspended",
            suspensions=suspensions,
            multiplier=multiplier,
            minutes=round(duration / 60, 1),
        )
        return duration

    def record_success(self) -> None:
        """Reset backoff growth after a successful call."""
        with self._lock:
            if self.consecutive_suspensions:
                logger.info(
                    "Primary provider recovered",
                    previous_suspensions=self.consecutive_suspensions,
                )
            self.consecutive_suspensions = 0

    def snapshot(self) -> HealthSnapshot:
        """Get a consistent copy of the state."""
        with self._lock:
            now = self._clock()
            return HealthSnapshot(
                status=self._status(now),
                suspended_until=self.suspended_until,
                consecutive_suspensions=self.consecutive_suspensions,
                remaining_seconds=max(0.0, self.suspended_until - now),
            )

    def reset(self) -> None:
        """Return to the never-suspended state."""
        with self._lock:
            self.suspended_until = 0.0
            self.consecutive_suspensions = 0

    def _status(self, now: float) -> HealthStatus:
        if now < self.suspended_until:
            return HealthStatus.SUSPENDED
        return HealthStatus.HEALTHY
