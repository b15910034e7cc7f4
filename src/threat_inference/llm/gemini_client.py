"""
Gemini client implementation for LLM inference.

Communicates with the Gemini API through the google-genai SDK (async surface).
Supports:
- Google Search grounding (tool enabled per request)
- Low-temperature generation for deterministic classification
- Grounding chunk extraction from the first candidate
- Translation of SDK / transport errors into ServiceError subclasses

One call per generate(); retries belong to RetryEngine.
"""

import asyncio
import os
import time
from typing import Any, Optional

import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from threat_inference.config import Settings
from threat_inference.llm.base_client import BaseLLMClient
from threat_inference.llm.exceptions import (
    ServiceAuthError,
    ServiceConnectionError,
    ServiceError,
    ServiceModelNotAvailableError,
    ServiceRateLimitError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from threat_inference.models.llm_models import (
    GroundingChunk,
    LLMGenerationRequest,
    LLMGenerationResponse,
    WebSource,
)
from threat_inference.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


DEFAULT_API_KEY_ENV_VARS = ("API_KEY", "GEMINI_API_KEY")


def resolve_api_key(env_vars: tuple[str, ...] | list[str] = DEFAULT_API_KEY_ENV_VARS) -> str:
    """
    Read the API key from the process environment.

    Returns the first non-empty value among ``env_vars``, or "" when none is
    set. A missing key is not an error here: the service rejects it.
    """
    for name in env_vars:
        value = os.environ.get(name, "")
        if value:
            return value
    return ""


class GeminiClient(BaseLLMClient):
    """
    Gemini-specific LLM client using the google-genai async API.

    Request shape:
        model=<model>, contents=<prompt>,
        config={tools: [google_search], temperature: 0.1}

    The API key is resolved at invocation time, so rotating the environment
    variable takes effect on the next call. The SDK client is cached per key.
    """

    def __init__(
        self,
        timeout: float = 0,
        api_key: Optional[str] = None,
        api_key_env_vars: tuple[str, ...] | list[str] = DEFAULT_API_KEY_ENV_VARS,
        **kwargs,
    ):
        """
        Initialize Gemini client.

        Args:
            timeout: Per-call timeout in seconds (0 = no client-side timeout)
            api_key: Explicit key; when None it is read from the environment on each call
            api_key_env_vars: Environment variables searched for the key, in order
            **kwargs: Additional config
        """
        super().__init__(timeout=timeout, **kwargs)
        self._explicit_api_key = api_key
        self.api_key_env_vars = tuple(api_key_env_vars)
        self._client: Optional[genai.Client] = None
        self._client_key: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(timeout=settings.LLM_TIMEOUT, api_key_env_vars=settings.API_KEY_ENV_VARS)

    def _get_client(self) -> genai.Client:
        """Get or create the SDK client for the current API key."""
        api_key = (
            self._explicit_api_key
            if self._explicit_api_key is not None
            else resolve_api_key(self.api_key_env_vars)
        )
        if self._client is None or self._client_key != api_key:
            try:
                self._client = genai.Client(api_key=api_key)
            except ValueError as e:
                # The SDK refuses to build a client without a key; surface it
                # the same way the service rejects an empty key.
                raise ServiceAuthError(
                    "Gemini API key missing or rejected",
                    details={"env_vars": list(self.api_key_env_vars), "error": str(e)},
                ) from e
            self._client_key = api_key
            logger.debug("Created new google-genai client", has_api_key=bool(api_key))
        return self._client

    @staticmethod
    def build_config(request: LLMGenerationRequest) -> types.GenerateContentConfig:
        """Translate a generation request into the SDK config object."""
        tools = [types.Tool(google_search=types.GoogleSearch())] if request.search_grounding else None
        return types.GenerateContentConfig(
            tools=tools,
            temperature=request.temperature,
            max_output_tokens=request.max_output_tokens,
        )

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion using generate_content.

        Raises:
            ServiceError subclass on any failure of the call
        """
        start_time = time.time()
        client = self._get_client()
        config = self.build_config(request)

        logger.info(
            "Sending generation request to Gemini",
            model=request.model,
            prompt_length=len(request.prompt),
            temperature=request.temperature,
            search_grounding=request.search_grounding,
        )

        try:
            call = client.aio.models.generate_content(
                model=request.model,
                contents=request.prompt,
                config=config,
            )
            if self.timeout and self.timeout > 0:
                response = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                response = await call

        except asyncio.TimeoutError as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Gemini request timeout", timeout=self.timeout)
            raise ServiceTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"timeout": self.timeout},
            ) from e

        except httpx.TimeoutException as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Gemini transport timeout", error=str(e))
            raise ServiceTimeoutError(
                f"Transport timeout: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        except httpx.TransportError as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Gemini network error", error=str(e))
            raise ServiceConnectionError(
                f"Network error: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        except genai_errors.APIError as e:
            self._observe_failure(request.model, start_time)
            raise self._translate_api_error(e, request.model) from e

        except Exception as e:
            self._observe_failure(request.model, start_time)
            logger.error(
                "Unexpected error in Gemini generation",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ServiceError(
                f"Unexpected error: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)
        try:
            result = self._parse_response(response, request.model, latency_ms)
        except Exception as e:
            logger.error(
                "Unexpected Gemini response shape",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ServiceError(
                f"Unreadable Gemini response: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Gemini generation successful",
            model=result.model_version,
            latency_ms=latency_ms,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
            finish_reason=result.finish_reason,
            grounding_chunks=len(result.grounding_chunks),
        )

        llm_latency_seconds.labels(model=request.model, success="true").observe(latency_ms / 1000.0)
        if result.prompt_tokens:
            llm_tokens_total.labels(model=request.model, token_type="prompt").inc(result.prompt_tokens)
        if result.completion_tokens:
            llm_tokens_total.labels(model=request.model, token_type="completion").inc(
                result.completion_tokens
            )

        return result

    @staticmethod
    def _observe_failure(model: str, start_time: float) -> None:
        llm_latency_seconds.labels(model=model, success="false").observe(time.time() - start_time)

    @staticmethod
    def _translate_api_error(error: genai_errors.APIError, model: str) -> ServiceError:
        """Map an SDK APIError onto the ServiceError taxonomy."""
        status = getattr(error, "code", None)
        details = {"status": status, "model": model, "error": getattr(error, "message", None) or str(error)}

        logger.error("Gemini API error", status=status, error=details["error"])

        if isinstance(error, genai_errors.ServerError):
            return ServiceUnavailableError(f"Gemini server error: {status}", details=details)
        if status in (401, 403):
            return ServiceAuthError(f"Gemini rejected the credentials: {status}", details=details)
        if status == 429:
            return ServiceRateLimitError("Gemini quota exhausted or rate limited", details=details)
        if status == 404:
            return ServiceModelNotAvailableError(f"Model not found: {model}", details=details)
        # API key problems are reported as 400 INVALID_ARGUMENT by the Gemini API
        if status == 400 and "api key" in str(details["error"]).lower():
            return ServiceAuthError("Gemini rejected the API key", details=details)
        return ServiceError(f"Gemini client error: {status}", details=details)

    @staticmethod
    def _parse_response(response: Any, model: str, latency_ms: int) -> LLMGenerationResponse:
        """Project the SDK response onto LLMGenerationResponse."""
        content = response.text or ""

        candidates = response.candidates or []
        first = candidates[0] if candidates else None

        chunks: list[GroundingChunk] = []
        metadata = getattr(first, "grounding_metadata", None) if first is not None else None
        for chunk in (getattr(metadata, "grounding_chunks", None) or []):
            web = getattr(chunk, "web", None)
            if web is None:
                chunks.append(GroundingChunk())
            else:
                chunks.append(GroundingChunk(web=WebSource(uri=web.uri, title=web.title)))

        finish_reason = getattr(first, "finish_reason", None) if first is not None else None
        usage = response.usage_metadata

        return LLMGenerationResponse(
            content=content,
            grounding_chunks=chunks,
            model_version=response.model_version or model,
            finish_reason=str(getattr(finish_reason, "value", finish_reason) or "unknown").lower(),
            usage_tokens=getattr(usage, "total_token_count", None),
            prompt_tokens=getattr(usage, "prompt_token_count", None),
            completion_tokens=getattr(usage, "candidates_token_count", None),
            latency_ms=latency_ms,
            raw_metadata={
                "web_search_queries": list(getattr(metadata, "web_search_queries", None) or []),
            },
        )

    async def close(self):
        """Drop the cached SDK client; the next call builds a fresh one."""
        self._client = None
        self._client_key = None
        logger.debug("Closed Gemini client")

    def __repr__(self) -> str:
        return f"GeminiClient(timeout={self.timeout}s, api_key_env_vars={list(self.api_key_env_vars)})"
