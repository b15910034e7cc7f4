"""
Model output validation and normalization.

- extractor.py: JSON candidate extraction (first '{' to last '}')
- stage1_json_parse.py: JSON parsing
- stage2_schema.py: JSON Schema validation (required fields, types)
- normalizer.py: Orchestrates the stages, clamps scores, substitutes the fallback
"""

from .exceptions import (
    MalformedResponseError,
    JSONParseError,
    SchemaValidationError,
)
from .extractor import ResponseExtractor
from .normalizer import ResultNormalizer, build_fallback_result

__all__ = [
    "ResponseExtractor",
    "ResultNormalizer",
    "build_fallback_result",
    "MalformedResponseError",
    "JSONParseError",
    "SchemaValidationError",
]
