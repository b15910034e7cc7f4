"""
Stage 1: JSON Parse Validation.

Turns the extracted candidate into a dict. Anything that is not a JSON
object raises JSONParseError, which the normalizer converts into the
fallback result.
"""

import json
import structlog

from threat_inference.monitoring.metrics import validation_failures_total
from .exceptions import JSONParseError

logger = structlog.get_logger(__name__)


class Stage1JSONParse:
    """Stage 1 validator: candidate string -> dict."""

    @staticmethod
    def _reject(error_type: str, message: str, content: str | None, parse_error: str) -> JSONParseError:
        validation_failures_total.labels(stage="stage1", error_type=error_type).inc()
        return JSONParseError(message, raw_content=content, parse_error=parse_error)

    def validate(self, content: str | None) -> dict:
        """
        Parse the JSON candidate extracted from the model text.

        Raises:
            JSONParseError: empty input, invalid JSON, or a non-object top level
        """
        if not content or not content.strip():
            raise self._reject(
                "empty_content",
                "Model response content is empty or whitespace-only",
                content,
                "Empty content",
            )

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise self._reject(
                "json_decode_error",
                f"Failed to parse model response as JSON: {e.msg}",
                content,
                f"{e.msg} at line {e.lineno} col {e.colno}",
            ) from e
        except ValueError as e:
            # e.g. integers beyond sys.get_int_max_str_digits()
            raise self._reject(
                "invalid_value",
                "Model response JSON contains an unparseable value",
                content,
                str(e),
            ) from e
        except RecursionError as e:
            raise self._reject(
                "nesting_too_deep",
                "Model response JSON is nested too deeply",
                content,
                str(e),
            ) from e

        if not isinstance(parsed, dict):
            kind = type(parsed).__name__
            raise self._reject(
                "not_json_object",
                f"Model response is not a JSON object (got {kind})",
                content,
                f"Expected dict, got {kind}",
            )

        logger.debug("Stage 1: parsed JSON", top_level_keys=len(parsed))
        return parsed
