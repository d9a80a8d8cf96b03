"""Login throttling wired into the HTTP layer.

This module holds the request-facing pieces of rate limiting:

- ``get_client_identifier``: derive a key from forwarded-address headers.
- ``format_wait_time`` / ``retry_after_seconds``: turn a reset timestamp
  into user-facing text and a ``Retry-After`` value.
- ``RateLimitSweeper``: periodic task reclaiming expired records.
- ``enforce_login_rate_limit``: FastAPI dependency guarding the login route.

The limiter instance itself is created by the app factory and lives on
``app.state``; routes receive it through ``get_login_limiter``.

Limits are per process. Horizontally scaled instances each keep their own
map and a restart clears it, so enforcement is best effort.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
import time
from typing import Annotated, Mapping

from fastapi import Depends, Request

from petvalues.adapters.rate_limit.base import AbstractRateLimiter
from petvalues.core.config import settings
from petvalues.core.errors import RateLimitedAppError
from petvalues.core.logging import hash_for_log

logger = logging.getLogger(__name__)

LOGIN_IDENTIFIER_PREFIX = "login_"


def _now_ms() -> int:
    return int(time.time() * 1000)


def get_client_identifier(headers: Mapping[str, str], remote_addr: str | None = None) -> str:
    """Best-effort client address for keying the limiter.

    Priority: first entry of ``x-forwarded-for``, then ``x-real-ip``, then
    the socket peer address, then ``"unknown"``.

    Args:
        headers: Request headers. Plain dicts must use lowercase keys;
            Starlette ``Headers`` are case-insensitive.
        remote_addr: Address of the connected peer, if known.

    Returns:
        A non-empty identifier string.

    Examples:
        >>> get_client_identifier({"x-forwarded-for": "1.2.3.4, 10.0.0.1"})
        '1.2.3.4'
        >>> get_client_identifier({"x-real-ip": "5.6.7.8"}, "127.0.0.1")
        '5.6.7.8'
        >>> get_client_identifier({})
        'unknown'
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    return headers.get("x-real-ip") or remote_addr or "unknown"


def retry_after_seconds(reset_time: int, *, now: int | None = None) -> int:
    """Whole seconds until ``reset_time`` (epoch ms), never negative."""
    current = _now_ms() if now is None else now
    return max(0, math.ceil((reset_time - current) / 1000))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_wait_time(reset_time: int, *, now: int | None = None) -> str:
    """Human-readable time left before ``reset_time``.

    Under a minute the value is shown in seconds, otherwise in minutes
    rounded up. A reset time already in the past renders as "0 seconds".

    Examples:
        >>> format_wait_time(31_000, now=1_000)
        '30 seconds'
        >>> format_wait_time(151_000, now=1_000)
        '3 minutes'
    """
    seconds = retry_after_seconds(reset_time, now=now)
    if seconds < 60:
        return _plural(seconds, "second")
    return _plural(math.ceil(seconds / 60), "minute")


class RateLimitSweeper:
    """Periodically reclaim expired limiter records.

    Memory reclamation only: ``check`` already replaces stale records on
    access. One task per sweeper, so sweeps never overlap.
    """

    def __init__(self, limiter: AbstractRateLimiter, *, interval_seconds: float) -> None:
        self._limiter = limiter
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        removed = self._limiter.sweep_expired()
        logger.debug("rate_limit.sweep", extra={"removed": removed})
        return removed

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="rate-limit-sweeper")
        logger.info("rate_limit.sweeper_started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("rate_limit.sweeper_stopped")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep_once()
            except Exception:
                logger.exception("rate_limit.sweep_failed")


def get_login_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""
    return request.app.state.login_limiter


async def enforce_login_rate_limit(
    request: Request,
    limiter: Annotated[AbstractRateLimiter, Depends(get_login_limiter)],
) -> None:
    """FastAPI dependency throttling login attempts per client address.

    Raises:
        RateLimitedAppError: When the client has used up its attempts for the
            current window. Mapped to HTTP 429 by the exception handlers.
    """
    remote_addr = request.client.host if request.client else None
    client = get_client_identifier(request.headers, remote_addr)
    identifier = f"{LOGIN_IDENTIFIER_PREFIX}{client}"

    decision = limiter.check(
        identifier,
        settings.app.login_rate_limit_window_ms,
        settings.app.login_rate_limit_max_attempts,
    )
    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "client_hash": hash_for_log(client),
                "attempts_left": decision.attempts_left,
            },
        )
        return

    now = _now_ms()
    retry_after = retry_after_seconds(decision.reset_time, now=now)
    logger.warning(
        "rate_limit.denied",
        extra={
            "client_hash": hash_for_log(client),
            "retry_after_s": retry_after,
            "window_ms": settings.app.login_rate_limit_window_ms,
        },
    )
    raise RateLimitedAppError(
        code="too_many_login_attempts",
        message=(
            "Too many login attempts. Please wait "
            f"{format_wait_time(decision.reset_time, now=now)} before trying again."
        ),
        retry_after=retry_after,
    )
