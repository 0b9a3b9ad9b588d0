"""Process-wide request pacing for the TMDB client."""

from __future__ import annotations

import threading
import time
from typing import Callable


class RateLimiter:
    """Hands out request slots spaced ``1 / rate_per_second`` apart.

    Each slot is claimed by exactly one caller under a lock, so however many
    threads call :meth:`acquire`, at most ``rate_per_second`` of them are
    released in any one-second window. Callers are served in the order they
    claim slots.
    """

    def __init__(
        self,
        rate_per_second: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate_per_second <= 0:
            raise ValueError("rate_per_second must be positive.")
        self.interval = 1.0 / rate_per_second
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._next_slot = 0.0

    def acquire(self) -> float:
        """Block until the caller's slot. Returns the slot time."""
        with self._lock:
            now = self._clock()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self.interval

        wait = slot - now
        if wait > 0:
            self._sleep(wait)
        return slot
