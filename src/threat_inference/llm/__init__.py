"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- GeminiClient: google-genai implementation with Google Search grounding
- PromptBuilder: Compiles the analysis prompt from raw email text
- GroundingSourceMapper: Projects grounding chunks onto citation sources
- text_utils: Text helpers (excerpts, token estimates)
- exceptions: ServiceError hierarchy
"""

from threat_inference.llm.base_client import BaseLLMClient
from threat_inference.llm.gemini_client import GeminiClient, resolve_api_key
from threat_inference.llm.grounding import GroundingSourceMapper
from threat_inference.llm.prompt_builder import PromptBuilder
from threat_inference.llm.exceptions import (
    ServiceError,
    ServiceConnectionError,
    ServiceTimeoutError,
    ServiceUnavailableError,
    ServiceRateLimitError,
    ServiceAuthError,
    ServiceModelNotAvailableError,
)

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "resolve_api_key",
    "GroundingSourceMapper",
    "PromptBuilder",
    "ServiceError",
    "ServiceConnectionError",
    "ServiceTimeoutError",
    "ServiceUnavailableError",
    "ServiceRateLimitError",
    "ServiceAuthError",
    "ServiceModelNotAvailableError",
]
