"""
In-memory fixed-window rate limiting.

The counters live in the process that owns the ``RateLimiter`` instance.
Several workers or hosts each keep their own counts, so the effective limit
behind a load balancer is ``max_requests`` times the number of processes.
"""
from __future__ import annotations
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float


class RateLimiter:
    def __init__(
        self,
        window_seconds: float,
        max_requests: int,
        message: str = "Too many requests",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.message = message
        self.clock = clock
        self._clients: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def check(self, client_id: str) -> RateLimitResult:
        """Count one request from ``client_id`` and say whether it may proceed."""
        now = self.clock()
        with self._lock:
            # sweep stale clients now and then instead of on every call
            if random.random() < 0.01:
                self._prune(now)

            entry = self._clients.get(client_id)
            if entry is None or entry.reset_at <= now:
                entry = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
                self._clients[client_id] = entry
                return RateLimitResult(True, self.max_requests - 1, entry.reset_at)

            entry.count += 1
            if entry.count > self.max_requests:
                return RateLimitResult(False, 0, entry.reset_at)
            return RateLimitResult(True, self.max_requests - entry.count, entry.reset_at)

    def retry_after(self, result: RateLimitResult) -> int:
        return max(0, int(result.reset_at - self.clock() + 0.999))

    def state(self, client_id: str) -> RateLimitEntry | None:
        return self._clients.get(client_id)

    def reset(self, client_id: str) -> None:
        with self._lock:
            self._clients.pop(client_id, None)

    def clear(self) -> None:
        with self._lock:
            self._clients.clear()

    def _prune(self, now: float) -> None:
        for key in [k for k, e in self._clients.items() if e.reset_at <= now]:
            del self._clients[key]
