"""Politeness scheduler for outbound upstream requests.

Paces requests to scrape-based upstreams with a minimum gap between requests,
a sliding-window cap and random jitter, and rotates client identities so the
traffic does not carry a static fingerprint.
"""

import asyncio
import random
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from websearch.logging import get_logger

logger = get_logger("websearch.politeness")

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
)

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
}

# (header, value, probability of being sent)
OPTIONAL_HEADERS = (
    ("DNT", "1", 0.5),
    ("Cache-Control", "max-age=0", 0.3),
)


@dataclass
class RequestCadenceState:
    """Request history shared by every caller of one scheduler."""

    last_request_at: float | None = None
    recent_requests: deque[float] = field(default_factory=deque)
    request_count: int = 0

    def evict_older_than(self, cutoff: float) -> None:
        """Drop request timestamps older than the cutoff."""
        while self.recent_requests and self.recent_requests[0] < cutoff:
            self.recent_requests.popleft()


class PolitenessScheduler:
    """Gates outbound requests to a single upstream.

    Every caller awaits ``acquire()`` before issuing a request. Callers are
    serialized by a lock, so the spacing and window rules hold across
    concurrent tasks.

    Example:
        >>> scheduler = PolitenessScheduler(max_requests=10, window_seconds=60)
        >>> await scheduler.acquire()
        >>> headers = {"User-Agent": scheduler.identity()}
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        min_delay_seconds: float = 2.0,
        max_jitter_seconds: float = 3.0,
        window_margin_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        """Initialize the scheduler.

        Args:
            max_requests: Maximum requests inside one sliding window
            window_seconds: Length of the sliding window
            min_delay_seconds: Minimum gap between two consecutive requests
            max_jitter_seconds: Upper bound of the uniform random delay
            window_margin_seconds: Extra wait once the window is full
            clock: Monotonic time source in seconds
            sleep: Coroutine used to wait
            rng: Random source for jitter and optional headers
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.min_delay_seconds = min_delay_seconds
        self.max_jitter_seconds = max_jitter_seconds
        self.window_margin_seconds = window_margin_seconds

        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._lock = asyncio.Lock()
        self.state = RequestCadenceState(recent_requests=deque(maxlen=max_requests))

    async def acquire(self) -> float:
        """Wait until the next request may be issued, then record it.

        Returns:
            float: Total delay applied in seconds
        """
        async with self._lock:
            state = self.state
            waited = 0.0

            now = self._clock()
            state.evict_older_than(now - self.window_seconds)

            if len(state.recent_requests) >= self.max_requests:
                oldest = state.recent_requests[0]
                delay = oldest + self.window_seconds + self.window_margin_seconds - now
                if delay > 0:
                    logger.info(
                        "Request window full, waiting",
                        window_requests=len(state.recent_requests),
                        delay_s=round(delay, 3),
                    )
                    await self._sleep(delay)
                    waited += delay
                now = self._clock()
                state.evict_older_than(now - self.window_seconds)

            if state.last_request_at is not None:
                since_last = now - state.last_request_at
                if since_last < self.min_delay_seconds:
                    delay = self.min_delay_seconds - since_last
                    logger.debug("Spacing request", delay_s=round(delay, 3))
                    await self._sleep(delay)
                    waited += delay

            if self.max_jitter_seconds > 0:
                jitter = self._rng.uniform(0, self.max_jitter_seconds)
                await self._sleep(jitter)
                waited += jitter

            now = self._clock()
            state.last_request_at = now
            state.recent_requests.append(now)
            state.request_count += 1

            return waited

    def identity(self) -> str:
        """Get the client identity (user agent) for the next request.

        Returns:
            str: User agent chosen round-robin by request count
        """
        return USER_AGENTS[self.state.request_count % len(USER_AGENTS)]

    def supplementary_headers(self) -> dict[str, str]:
        """Get browser-like headers with a few optional entries.

        Each optional header is included by an independent coin flip.

        Returns:
            dict[str, str]: Header map
        """
        headers = dict(BASE_HEADERS)
        for name, value, probability in OPTIONAL_HEADERS:
            if self._rng.random() < probability:
                headers[name] = value
        return headers

    def reset(self) -> None:
        """Forget all recorded requests."""
        self.state = RequestCadenceState(recent_requests=deque(maxlen=self.max_requests))
