"""
Explicit retry policy for single storage operations.

The benchmark does not retry by default: a failed operation aborts the run.
A policy with more than one attempt retries with exponential backoff, and the
backoff delay is part of the measured latency of that iteration.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from oiobench.configuration import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_MAX_BACKOFF_SECONDS,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Retry an async operation up to ``max_attempts`` times."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        max_backoff_seconds: float = DEFAULT_MAX_BACKOFF_SECONDS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds

    def backoff(self, attempt: int) -> float:
        """Delay before the retry that follows the given failed attempt (1-based)."""
        return min(self.backoff_seconds * (2 ** (attempt - 1)), self.max_backoff_seconds)

    async def call(self, operation: Callable[[], Awaitable[T]], description: str = "operation") -> T:
        """Run ``operation``, retrying failures; the last failure propagates."""
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as e:
                if attempt >= self.max_attempts:
                    raise
                delay = self.backoff(attempt)
                logger.warning(
                    f"{description} failed (attempt {attempt}/{self.max_attempts}): {e}; "
                    f"retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)
                attempt += 1

    def __repr__(self) -> str:
        return f"RetryPolicy(max_attempts={self.max_attempts}, backoff_seconds={self.backoff_seconds})"


NO_RETRY = RetryPolicy()
