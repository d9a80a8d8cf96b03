"""Rate limiter interfaces.

Routes depend on this abstraction (not the concrete implementation) so the
in-memory store can later be swapped for a shared one without touching the
HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single ``check`` call.

    Attributes:
        allowed: Whether the attempt may proceed.
        reset_time: Epoch milliseconds at which the current window expires.
        attempts_left: Admitted attempts remaining in the window (0 when denied).
    """

    allowed: bool
    reset_time: int
    attempts_left: int


class AbstractRateLimiter(ABC):
    """Interface for keyed fixed-window attempt limiters."""

    @abstractmethod
    def check(
        self,
        identifier: str,
        window_ms: int,
        max_attempts: int = 1,
    ) -> RateLimitDecision:
        """Record an attempt for ``identifier`` and decide admission.

        Args:
            identifier: Key to track (e.g. ``"login_" + client address``).
            window_ms: Window length in milliseconds. Must be positive.
            max_attempts: Admitted attempts per window. Must be >= 1.

        Returns:
            RateLimitDecision for this attempt.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep_expired(self) -> int:
        """Drop records whose window has already ended.

        Returns:
            Number of records removed.
        """
        raise NotImplementedError
