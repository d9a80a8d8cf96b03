"""In-memory fixed-window attempt limiter.

Notes:
- Per-process only: every worker, instance or cold start has its own map, so
  limits are enforced per instance rather than globally.
- Thread-safe: a lock covers the read-check-write in ``check`` and the sweep.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from petvalues.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _RateRecord:
    attempts: int
    reset_time: int


class InMemoryRateLimiter(AbstractRateLimiter):
    """Keyed attempt counter where each identifier owns its own window.

    A window opens on the first attempt for an identifier and lasts
    ``window_ms``. Attempts beyond ``max_attempts`` inside an open window are
    denied and not counted. Once the window has ended, the next attempt
    starts a fresh one.

    ``window_ms`` and ``max_attempts`` are trusted caller values and are not
    validated here.
    """

    def __init__(self, *, clock: Callable[[], int] = _now_ms) -> None:
        """Initialize an empty limiter.

        Args:
            clock: Time source returning UNIX time in milliseconds.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._records: dict[str, _RateRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _start_window(self, identifier: str, now: int, window_ms: int) -> _RateRecord:
        record = _RateRecord(attempts=1, reset_time=now + window_ms)
        self._records[identifier] = record
        return record

    def check(
        self,
        identifier: str,
        window_ms: int,
        max_attempts: int = 1,
    ) -> RateLimitDecision:
        now = self._clock()

        with self._lock:
            record = self._records.get(identifier)

            if record is None or now >= record.reset_time:
                record = self._start_window(identifier, now, window_ms)
                return RateLimitDecision(
                    allowed=True,
                    reset_time=record.reset_time,
                    attempts_left=max_attempts - 1,
                )

            if record.attempts < max_attempts:
                record.attempts += 1
                return RateLimitDecision(
                    allowed=True,
                    reset_time=record.reset_time,
                    attempts_left=max_attempts - record.attempts,
                )

            return RateLimitDecision(
                allowed=False,
                reset_time=record.reset_time,
                attempts_left=0,
            )

    def sweep_expired(self) -> int:
        now = self._clock()

        with self._lock:
            expired = [key for key, record in self._records.items() if record.reset_time < now]
            for key in expired:
                del self._records[key]

        return len(expired)
