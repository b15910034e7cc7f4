"""
Custom exceptions for the LLM client layer.

ServiceError is the only error family allowed to escape the analysis
pipeline. The ``retryable`` flag lets the retry engine distinguish transient
failures (network, timeouts, 5xx, quota) from permanent ones (bad credentials,
unknown model, malformed request).
"""


class ServiceError(Exception):
    """
    Base exception for all failures of the external AI service call.

    All service-specific exceptions inherit from this to allow catching
    any call failure with a single except clause.
    """
    retryable = False

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ServiceConnectionError(ServiceError):
    """
    Raised when the service cannot be reached.

    Includes DNS failures, refused connections, dropped sockets.
    """
    retryable = True


class ServiceTimeoutError(ServiceConnectionError):
    """
    Raised when the call exceeds the configured timeout.

    Separate from generic connection errors so callers can report it distinctly.
    """
    pass


class ServiceUnavailableError(ServiceError):
    """Raised on 5xx responses from the service."""
    retryable = True


class ServiceRateLimitError(ServiceError):
    """
    Raised when the service rejects the call for quota / rate limits (HTTP 429).

    This error type triggers exponential backoff retry.
    """
    retryable = True


class ServiceAuthError(ServiceError):
    """
    Raised when the API key is missing, invalid or lacks permission (401/403).

    A missing key is not validated locally: an empty key is sent and the
    service rejection surfaces here.
    """
    pass


class ServiceModelNotAvailableError(ServiceError):
    """Raised when the configured model does not exist for this key (404)."""
    pass
