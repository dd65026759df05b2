"""Bounded exponential backoff for store writes.

A snapshot write that fails with a retryable error is attempted again after
base_delay, base_delay * 2, ... (capped at max_delay). Once the retry budget
is spent the caller gets RetryExhaustedError chained to the last failure.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterator, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryExhaustedError(Exception):
    """Raised when every attempt of a retried operation failed."""

    def __init__(self, operation: str, attempts: int, last_error: Exception):
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"{operation} failed after {attempts} attempts: {type(last_error).__name__}: {last_error}"
        )


class RetryWithBackoff:
    """
    Retry a coroutine function with exponential backoff.

    Args:
        max_retries: Retries after the first attempt (0 = single attempt)
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any single delay
        exponential_base: Growth factor between consecutive delays
        retry_on_exceptions: Exception types worth retrying (None = all)
        operation: Name used in log lines and in RetryExhaustedError
    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        exponential_base: float = 2.0,
        retry_on_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
        operation: str = "store write"
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if base_delay <= 0:
            raise ValueError("base_delay must be > 0")
        if max_delay < base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if exponential_base <= 1:
            raise ValueError("exponential_base must be > 1")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retry_on_exceptions = retry_on_exceptions
        self.operation = operation

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delays(self) -> Iterator[float]:
        """Sleep durations between attempts, one per retry."""
        for retry in range(self.max_retries):
            yield self._calculate_delay(retry)

    def is_retryable(self, error: Exception) -> bool:
        if self.retry_on_exceptions is None:
            return True
        return isinstance(error, self.retry_on_exceptions)

    async def execute(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        **kwargs
    ) -> T:
        """
        Await func(*args, **kwargs), retrying retryable failures.

        Raises:
            RetryExhaustedError: All attempts failed (chained to the last error)
            Exception: The first non-retryable error, unchanged
        """
        delays = self.delays()
        attempt = 0
        while True:
            attempt += 1
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                if not self.is_retryable(e):
                    raise

                delay = next(delays, None)
                if delay is None:
                    logger.error(
                        f"{self.operation} gave up after {attempt} attempts: "
                        f"{type(e).__name__}: {e}"
                    )
                    raise RetryExhaustedError(self.operation, attempt, e) from e

                logger.warning(
                    f"{self.operation} attempt {attempt}/{self.max_attempts} failed "
                    f"({type(e).__name__}: {e}); retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)
            else:
                if attempt > 1:
                    logger.info(f"{self.operation} succeeded on attempt {attempt}/{self.max_attempts}")
                return result

    def _calculate_delay(self, retry: int) -> float:
        """min(base_delay * exponential_base ** retry, max_delay)"""
        return min(self.base_delay * (self.exponential_base ** retry), self.max_delay)
