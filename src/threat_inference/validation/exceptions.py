"""
Validation-specific exceptions for the result normalizer.

These never escape the pipeline: ResultNormalizer catches every
MalformedResponseError and substitutes the fallback result.
"""

from typing import Any


class MalformedResponseError(Exception):
    """
    Base exception for model output that cannot become an AnalysisResult.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(MalformedResponseError):
    """
    Stage 1: JSON parsing failed.

    Raised when the extracted candidate is not a valid JSON object.
    """

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        """
        Initialize JSON parse error.

        Args:
            message: Error description
            raw_content: First 500 chars of malformed content (for debugging)
            parse_error: Original json.JSONDecodeError message
        """
        details = {}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details)


class SchemaValidationError(MalformedResponseError):
    """
    Stage 2: the parsed object does not have the AnalysisResult shape.

    Raised for missing required fields, wrong types and unknown enum literals.
    """

    def __init__(
        self,
        message: str,
        validation_errors: list[str] | None = None,
        schema_path: str | None = None
    ):
        """
        Initialize schema validation error.

        Args:
            message: Error description
            validation_errors: List of validation error messages
            schema_path: Path to the schema file used for validation
        """
        details = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        if schema_path:
            details["schema_path"] = schema_path

        super().__init__(message, details)
