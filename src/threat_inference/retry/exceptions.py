"""
Retry engine exceptions.
"""

from typing import TYPE_CHECKING

from threat_inference.llm.exceptions import ServiceError

if TYPE_CHECKING:
    from threat_inference.retry.metadata import RetryMetadata


class RetryExhausted(ServiceError):
    """
    Raised when every attempt failed with a transient service error.

    It is a ServiceError, so callers handle it like any other call failure.

    Attributes:
        retry_metadata: Attempts, latency and the failure of each attempt
        last_error: ServiceError raised by the final attempt
    """

    def __init__(self, retry_metadata: "RetryMetadata", last_error: ServiceError) -> None:
        self.retry_metadata = retry_metadata
        self.last_error = last_error

        super().__init__(
            f"Service call failed after {retry_metadata.total_attempts} attempts. "
            f"Final error: {type(last_error).__name__}: {last_error.message}",
            details={
                "total_attempts": retry_metadata.total_attempts,
                "total_latency_ms": retry_metadata.total_latency_ms,
                "last_error_type": type(last_error).__name__,
            },
        )
