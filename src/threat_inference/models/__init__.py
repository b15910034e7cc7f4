"""Data models: input request, LLM request/response, analysis result."""

from threat_inference.models.enums import AnalysisState, SpamCategory, UrgencyLevel, Verdict
from threat_inference.models.input_models import AnalysisRequest
from threat_inference.models.llm_models import (
    GroundingChunk,
    LLMGenerationRequest,
    LLMGenerationResponse,
    WebSource,
)
from threat_inference.models.output_models import (
    AnalysisOutcome,
    AnalysisResult,
    GroundingSource,
    PassiveAnalysis,
    RiskDimensions,
    SocialEngineering,
    SpamAnalysis,
    TechnicalAnalysis,
)

__all__ = [
    "AnalysisState",
    "SpamCategory",
    "UrgencyLevel",
    "Verdict",
    "AnalysisRequest",
    "GroundingChunk",
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    "WebSource",
    "AnalysisOutcome",
    "AnalysisResult",
    "GroundingSource",
    "PassiveAnalysis",
    "RiskDimensions",
    "SocialEngineering",
    "SpamAnalysis",
    "TechnicalAnalysis",
]
