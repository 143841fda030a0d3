"""Backoff schedule for transient Photon API failures.

This is separate from the task poller's consecutive-error count: a request
that exhausts these attempts counts as a single failed fetch there.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass

import httpx

from photonctl.config.models import RetryConfig

TRANSIENT_ERRORS: tuple[type[httpx.HTTPError], ...] = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadError,
    httpx.ReadTimeout,
    httpx.PoolTimeout,
    httpx.RemoteProtocolError,
)


@dataclass(frozen=True)
class RetryPolicy:
    config: RetryConfig

    @property
    def attempts(self) -> int:
        return max(1, self.config.max_attempts)

    def backoff(self, attempt: int) -> float:
        """Seconds to sleep after failed `attempt` (1-based), jittered and capped."""

        delay = min(self.config.base_delay * 2 ** max(0, attempt - 1), self.config.max_delay)
        if delay <= 0 or self.config.jitter <= 0:
            return max(0.0, delay)
        spread = delay * self.config.jitter
        return max(0.0, delay + random.uniform(-spread, spread))

    def retryable_status(self, status_code: int) -> bool:
        return status_code in self.config.retry_statuses

    def retryable_error(self, exc: Exception) -> bool:
        return isinstance(exc, TRANSIENT_ERRORS)

    def retry_after(self, response: httpx.Response) -> float | None:
        """Server-requested delay from a numeric `Retry-After` header, capped at `max_delay`."""

        raw = response.headers.get("Retry-After")
        if raw is None:
            return None
        try:
            seconds = float(raw)
        except ValueError:
            return None
        return min(max(0.0, seconds), self.config.max_delay)

    async def pause(self, attempt: int, response: httpx.Response | None = None) -> None:
        requested = self.retry_after(response) if response is not None else None
        await asyncio.sleep(self.backoff(attempt) if requested is None else requested)
