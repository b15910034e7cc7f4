"""
Output data models for the Email Threat Inference Layer.

These models define the structured verdict produced by the LLM and accepted
by the normalizer. Field names on the wire are camelCase (``riskScore``,
``spamAnalysis``...), attributes are snake_case; both are accepted on input.

Scores are clamped rather than rejected: any 0-100 field that the model
returns out of range (or as a float) is rounded and clamped into [0, 100].
Type mismatches (strings, booleans, null) are still rejected.
"""

import math
from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from threat_inference.models.enums import SpamCategory, UrgencyLevel, Verdict


SCORE_MIN = 0
SCORE_MAX = 100


def clamp_score(value: Any) -> int:
    """Round a numeric score and clamp it to [0, 100]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"score must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError("score must be finite")
    return max(SCORE_MIN, min(SCORE_MAX, int(round(value))))


def normalize_enum_literal(value: Any) -> Any:
    """Accept ' malicious ' for MALICIOUS; non-strings are left for pydantic to reject."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


Score = Annotated[int, BeforeValidator(clamp_score)]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def require_visible(value: str) -> str:
    """Reject blank strings without altering the value."""
    if not value.strip():
        raise ValueError("must contain non-whitespace characters")
    return value


VerbatimStr = Annotated[str, AfterValidator(require_visible)]


class _WireModel(BaseModel):
    """Frozen model with camelCase aliases; unknown keys from the LLM are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class SpamAnalysis(_WireModel):
    """Spam / marketing classification."""

    is_spam: bool
    spam_score: Score
    category: Annotated[SpamCategory, BeforeValidator(normalize_enum_literal)]
    indicators: list[str] = Field(default_factory=list)


class RiskDimensions(_WireModel):
    """Four orthogonal sub-scores contributing to the overall assessment."""

    technical: Score
    content: Score
    social: Score
    reputation: Score


class TechnicalAnalysis(_WireModel):
    domain_reputation: str
    authentication_checks: str


class PassiveAnalysis(_WireModel):
    """
    Zero-click threats: payloads that fire on open/render, without a click.
    """

    has_tracking_pixels: bool
    has_dangerous_attachments: bool
    has_scripts_or_iframes: bool
    details: str


class SocialEngineering(_WireModel):
    tactics_used: list[str] = Field(default_factory=list)
    urgency_level: Annotated[UrgencyLevel, BeforeValidator(normalize_enum_literal)]


class AnalysisResult(_WireModel):
    """
    Complete threat assessment for one email.

    Constructed fresh per analysis call and immutable once returned. Every
    instance satisfies the range invariant: risk_score, confidence,
    spam_analysis.spam_score and all risk_dimensions are within [0, 100].
    """

    verdict: Annotated[Verdict, BeforeValidator(normalize_enum_literal)]
    risk_score: Score
    confidence: Score
    summary: NonEmptyStr
    spam_analysis: SpamAnalysis
    risk_dimensions: RiskDimensions
    technical_analysis: TechnicalAnalysis
    passive_analysis: PassiveAnalysis
    social_engineering: SocialEngineering
    web_intelligence: str
    recommendations: list[str] = Field(default_factory=list)


class GroundingSource(_WireModel):
    """A web citation that informed the model's answer, copied as returned."""

    title: VerbatimStr
    uri: VerbatimStr


class AnalysisOutcome(_WireModel):
    """
    What analyze() hands to the presentation layer: the result and its sources.

    ``degraded`` is True when the model output could not be parsed and the
    fallback result was substituted (the result then has confidence 0).
    """

    result: AnalysisResult
    sources: list[GroundingSource] = Field(default_factory=list)
    degraded: bool = False
    attempts: int = Field(default=1, ge=1)
    preview: str = ""
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
