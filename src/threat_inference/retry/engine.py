"""
Retry engine for transient service errors.

Retry Policy:
    1. Run the operation.
    2. On a retryable ServiceError (network, timeout, 5xx, rate limit), sleep
       RETRY_BACKOFF_BASE ** attempt seconds (capped at RETRY_BACKOFF_MAX) and
       try again, up to MAX_RETRIES additional attempts.
    3. Non-retryable ServiceErrors (auth, unknown model, bad request)
       propagate immediately and unchanged.
    4. When all attempts fail, raise RetryExhausted.

MAX_RETRIES = 0 (the default) disables retries entirely: every ServiceError,
transient or not, propagates unchanged.

Usage:
    engine = RetryEngine.from_settings(settings)
    response, metadata = await engine.execute(lambda: client.generate(request))
"""

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

import structlog

from threat_inference.config import Settings
from threat_inference.llm.exceptions import ServiceError
from threat_inference.monitoring.metrics import retries_total
from threat_inference.retry.exceptions import RetryExhausted
from threat_inference.retry.metadata import RetryMetadata

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RetryEngine:
    """
    Bounded retry with exponential backoff around one awaitable operation.

    Attributes:
        max_retries: Additional attempts after the first one
        backoff_base: Exponential backoff multiplier
        backoff_max: Upper bound for a single backoff sleep (seconds)
    """

    def __init__(
        self,
        max_retries: int = 0,
        backoff_base: float = 2.0,
        backoff_max: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self._sleep = sleep

        logger.info(
            "RetryEngine initialized",
            max_retries=max_retries,
            backoff_base=backoff_base,
            backoff_max=backoff_max,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryEngine":
        return cls(
            max_retries=settings.MAX_RETRIES,
            backoff_base=settings.RETRY_BACKOFF_BASE,
            backoff_max=settings.RETRY_BACKOFF_MAX,
        )

    def backoff_seconds(self, attempt: int) -> float:
        """Backoff before attempt ``attempt + 1`` (attempt is 1-indexed)."""
        return min(self.backoff_base ** attempt, self.backoff_max)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> tuple[T, RetryMetadata]:
        """
        Run ``operation`` with the retry policy.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt

        Returns:
            Tuple of (operation result, retry metadata)

        Raises:
            ServiceError: Non-retryable failure, as raised by the operation
            RetryExhausted: Every attempt failed with a retryable error
                (only when max_retries > 0)
        """
        start_time = time.time()
        max_attempts = self.max_retries + 1
        failures: list[dict] = []

        for attempt in range(1, max_attempts + 1):
            try:
                result = await operation()
            except ServiceError as e:
                failures.append({
                    "attempt": attempt,
                    "error_type": type(e).__name__,
                    "message": e.message,
                    "details": e.details,
                })

                if not e.retryable or self.max_retries == 0:
                    logger.warning(
                        "Service error not retried",
                        attempt=attempt,
                        error_type=type(e).__name__,
                        retryable=e.retryable,
                    )
                    raise

                if attempt >= max_attempts:
                    metadata = RetryMetadata(
                        total_attempts=attempt,
                        total_latency_ms=int((time.time() - start_time) * 1000),
                        failures=failures,
                    )
                    logger.error(
                        "Retry attempts exhausted",
                        total_attempts=attempt,
                        last_error_type=type(e).__name__,
                    )
                    raise RetryExhausted(metadata, e) from e

                backoff = self.backoff_seconds(attempt)
                retries_total.labels(error_type=type(e).__name__).inc()
                logger.info(
                    "Transient service error, retrying",
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error_type=type(e).__name__,
                    backoff_seconds=backoff,
                )
                await self._sleep(backoff)
                continue

            metadata = RetryMetadata(
                total_attempts=attempt,
                total_latency_ms=int((time.time() - start_time) * 1000),
                failures=failures,
            )
            if metadata.retried:
                logger.info("Service call succeeded after retry", total_attempts=attempt)
            return result, metadata

        # Unreachable: the loop either returns or raises
        raise RuntimeError("retry loop exited without result")
