"""
LLM-specific data models for request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with the inference service (Gemini). They are separate from the business
models (AnalysisResult) so the client implementation can change without
touching normalization.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class LLMGenerationRequest(BaseModel):
    """
    Internal request model for LLM generation.

    This is the standardized format sent to any LLM client implementation.
    It abstracts away provider-specific details.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Complete compiled prompt")
    model: str = Field(..., description="Model name/identifier (e.g., 'gemini-2.5-flash')")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    search_grounding: bool = Field(
        default=True,
        description="Enable the web-search tool so the answer is grounded in search results"
    )
    max_output_tokens: Optional[int] = Field(default=None, ge=1, description="Output token cap")


class WebSource(BaseModel):
    """Web citation inside a grounding chunk. Both fields may be missing upstream."""
    model_config = ConfigDict(frozen=True)

    uri: Optional[str] = None
    title: Optional[str] = None


class GroundingChunk(BaseModel):
    """One grounding chunk as returned by the service: ``{web?: {uri?, title?}}``."""
    model_config = ConfigDict(frozen=True)

    web: Optional[WebSource] = None


class LLMGenerationResponse(BaseModel):
    """
    Internal response model from LLM generation (the raw model response).

    Contains the free-form generated text plus grounding chunks and metadata
    for audit/logging. Extraction and normalization of the text happen in the
    validation layer; nothing here is trusted to be JSON.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(default="", description="Generated text (ideally, but not necessarily, JSON)")
    grounding_chunks: list[GroundingChunk] = Field(
        default_factory=list,
        description="Grounding chunks of the first candidate, in service order"
    )
    model_version: str = Field(..., description="Actual model version used (for audit trail)")
    finish_reason: str = Field(
        default="unknown",
        description="Why generation stopped: 'stop', 'max_tokens', 'safety', etc."
    )
    usage_tokens: Optional[int] = Field(
        default=None,
        description="Total tokens used (prompt + completion)"
    )
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(default=0, ge=0, description="Generation latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (for debugging)"
    )
