"""
Result normalizer: JSON candidate -> AnalysisResult.

Runs the candidate through:
- Stage 1: JSON parse
- Stage 2: JSON Schema (required fields, JSON types)
- Model validation: pydantic AnalysisResult (enum literals, score clamping)

Any MalformedResponseError is absorbed here: the caller always receives a
well-formed AnalysisResult, degraded to the deterministic fallback when the
model output cannot be used. A degraded result over a hard failure is the
contract with the presentation layer.
"""

from pydantic import ValidationError as PydanticValidationError
import structlog

from threat_inference.config import Settings
from threat_inference.llm.text_utils import excerpt
from threat_inference.models.enums import SpamCategory, UrgencyLevel, Verdict
from threat_inference.models.llm_models import LLMGenerationResponse
from threat_inference.models.output_models import (
    AnalysisResult,
    PassiveAnalysis,
    RiskDimensions,
    SocialEngineering,
    SpamAnalysis,
    TechnicalAnalysis,
)
from threat_inference.monitoring.metrics import fallback_results_total, validation_failures_total
from .exceptions import MalformedResponseError, SchemaValidationError
from .extractor import ResponseExtractor
from .stage1_json_parse import Stage1JSONParse
from .stage2_schema import Stage2SchemaValidation

logger = structlog.get_logger(__name__)


FALLBACK_SUMMARY_PREFIX = "Error parsing model output. Raw text: "


def build_fallback_result(raw_text: str | None, excerpt_chars: int = 100) -> AnalysisResult:
    """
    Deterministic degraded result used when model output cannot be parsed.

    SUSPICIOUS / risk 50 / confidence 0, neutral sub-objects, and a summary
    quoting the first ``excerpt_chars`` characters of the raw model text.
    """
    return AnalysisResult(
        verdict=Verdict.SUSPICIOUS,
        risk_score=50,
        confidence=0,
        summary=FALLBACK_SUMMARY_PREFIX + excerpt(raw_text, excerpt_chars),
        spam_analysis=SpamAnalysis(
            is_spam=False,
            spam_score=0,
            category=SpamCategory.UNKNOWN,
            indicators=[],
        ),
        risk_dimensions=RiskDimensions(technical=50, content=50, social=50, reputation=50),
        technical_analysis=TechnicalAnalysis(
            domain_reputation="Unknown",
            authentication_checks="Unknown",
        ),
        passive_analysis=PassiveAnalysis(
            has_tracking_pixels=False,
            has_dangerous_attachments=False,
            has_scripts_or_iframes=False,
            details="Analysis incomplete due to parsing error.",
        ),
        social_engineering=SocialEngineering(tactics_used=[], urgency_level=UrgencyLevel.MEDIUM),
        web_intelligence="Analysis failed to format correctly.",
        recommendations=["Manually review email."],
    )


class ResultNormalizer:
    """
    Turn a JSON candidate into a fully typed AnalysisResult, never raising
    for malformed model output.
    """

    def __init__(
        self,
        schema_path: str,
        fallback_excerpt_chars: int = 100,
        extractor: ResponseExtractor | None = None,
    ):
        """
        Initialize the normalizer.

        Args:
            schema_path: Path to analysis_result.schema.json
            fallback_excerpt_chars: Raw text length quoted in the fallback summary
            extractor: Candidate extractor used by normalize_response()
        """
        self.stage1 = Stage1JSONParse()
        self.stage2 = Stage2SchemaValidation(schema_path)
        self.fallback_excerpt_chars = fallback_excerpt_chars
        self.extractor = extractor or ResponseExtractor()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResultNormalizer":
        return cls(
            schema_path=settings.JSON_SCHEMA_PATH,
            fallback_excerpt_chars=settings.FALLBACK_EXCERPT_CHARS,
        )

    def parse(self, candidate: str | None) -> AnalysisResult:
        """
        Strict path: parse and validate, raising on malformed output.

        Raises:
            MalformedResponseError: JSONParseError or SchemaValidationError
        """
        parsed = self.stage1.validate(candidate)
        self.stage2.validate(parsed)

        try:
            return AnalysisResult.model_validate(parsed)
        except PydanticValidationError as e:
            validation_failures_total.labels(stage="model", error_type="model_validation").inc()
            error_messages = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise SchemaValidationError(
                f"Model validation failed: {len(error_messages)} error(s)",
                validation_errors=error_messages,
            ) from e

    def normalize_with_status(
        self, candidate: str | None, raw_text: str | None = None
    ) -> tuple[AnalysisResult, bool]:
        """
        Normalize a candidate and report whether the fallback was used.

        Args:
            candidate: Extracted JSON candidate
            raw_text: Full model text, quoted in the fallback summary
                (defaults to the candidate itself)

        Returns:
            Tuple of (AnalysisResult, degraded)
        """
        try:
            result = self.parse(candidate)
        except MalformedResponseError as e:
            source = raw_text if raw_text is not None else candidate
            # details carry snippets of the model output, which may quote the email
            logger.warning(
                "Model output unusable, substituting fallback result",
                error_type=type(e).__name__,
                error=e.message,
                parse_error=e.details.get("parse_error"),
                validation_error_count=len(e.details.get("validation_errors", [])),
                raw_length=len(source or ""),
                candidate_length=len(candidate or ""),
            )
            fallback_results_total.labels(reason=type(e).__name__).inc()
            return build_fallback_result(source, self.fallback_excerpt_chars), True

        logger.debug(
            "Normalized analysis result",
            verdict=result.verdict.value,
            risk_score=result.risk_score,
            confidence=result.confidence,
        )
        return result, False

    def normalize(self, candidate: str | None, raw_text: str | None = None) -> AnalysisResult:
        """Normalize a candidate; malformed output yields the fallback result."""
        result, _ = self.normalize_with_status(candidate, raw_text)
        return result

    def normalize_response(self, response: LLMGenerationResponse) -> tuple[AnalysisResult, bool]:
        """Extract the JSON candidate from a model response and normalize it."""
        candidate = self.extractor.extract(response.content)
        return self.normalize_with_status(candidate, raw_text=response.content)
