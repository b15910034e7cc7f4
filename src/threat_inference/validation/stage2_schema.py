"""
Stage 2: JSON Schema Validation.

Checks the parsed dict against the packaged analysis_result.schema.json
(required fields, JSON types). Ranges are left to the model layer, which
clamps scores instead of rejecting them.

The schema is part of the package: a missing or invalid schema file raises
its own error (FileNotFoundError, json.JSONDecodeError, SchemaError) and is
never reported as malformed model output.
"""

import json
from pathlib import Path

import structlog
from jsonschema import Draft7Validator

from threat_inference.monitoring.metrics import validation_failures_total
from .exceptions import SchemaValidationError

logger = structlog.get_logger(__name__)

MAX_REPORTED_ERRORS = 10


class Stage2SchemaValidation:
    """Stage 2 validator: dict -> AnalysisResult-shaped dict."""

    def __init__(self, schema_path: str):
        self.schema_path = schema_path
        self._validator: Draft7Validator | None = None

    @property
    def validator(self) -> Draft7Validator:
        """Draft 7 validator, built on first use."""
        if self._validator is None:
            schema = json.loads(Path(self.schema_path).read_text(encoding="utf-8"))
            Draft7Validator.check_schema(schema)
            self._validator = Draft7Validator(schema)
            logger.info("Loaded JSON Schema", schema_path=self.schema_path)
        return self._validator

    @staticmethod
    def _describe(error) -> str:
        location = ".".join(str(part) for part in error.path) or "root"
        return f"{location}: {error.message}"

    def validate(self, data: dict) -> None:
        """
        Raises:
            SchemaValidationError: data does not conform to the schema
        """
        errors = list(self.validator.iter_errors(data))
        if not errors:
            logger.debug("Stage 2: schema validation passed")
            return

        validation_failures_total.labels(stage="stage2", error_type="schema_violation").inc()
        raise SchemaValidationError(
            f"JSON Schema validation failed with {len(errors)} error(s)",
            validation_errors=[self._describe(e) for e in errors[:MAX_REPORTED_ERRORS]],
            schema_path=self.schema_path,
        )
