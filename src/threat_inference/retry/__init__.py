"""
Retry engine for transient failures of the external AI service.

Main Components:
    - RetryEngine: bounded retry with exponential backoff
    - RetryMetadata: Immutable history of retry attempts
    - RetryExhausted: ServiceError raised when all attempts fail

Usage:
    >>> from threat_inference.retry import RetryEngine
    >>> engine = RetryEngine(max_retries=2)
    >>> response, metadata = await engine.execute(lambda: client.generate(request))
"""

from threat_inference.retry.engine import RetryEngine
from threat_inference.retry.exceptions import RetryExhausted
from threat_inference.retry.metadata import RetryMetadata

__all__ = [
    "RetryEngine",
    "RetryExhausted",
    "RetryMetadata",
]
