"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass that captures the retry
history of one model call for logging and metrics.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetryMetadata:
    """
    Retry history of one model call.

    Attributes:
        total_attempts: Total number of generate() attempts made
        total_latency_ms: Time from first attempt to final result, backoff included (ms)
        failures: One entry per failed attempt (error type, message, details)
    """

    total_attempts: int
    total_latency_ms: int
    failures: list[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

    @property
    def retried(self) -> bool:
        return self.total_attempts > 1
