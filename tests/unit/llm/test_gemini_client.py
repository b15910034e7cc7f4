"""
Unit tests for GeminiClient.

The google-genai SDK client is patched; responses are SimpleNamespace
objects shaped like the SDK's GenerateContentResponse.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from threat_inference.llm.exceptions import (
    ServiceAuthError,
    ServiceConnectionError,
    ServiceError,
    ServiceModelNotAvailableError,
    ServiceRateLimitError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from threat_inference.llm.gemini_client import GeminiClient, resolve_api_key
from threat_inference.models.llm_models import LLMGenerationRequest


def make_sdk_response(text='{"verdict": "SAFE"}', chunks=None, queries=None):
    web_chunks = [
        SimpleNamespace(web=None if web is None else SimpleNamespace(uri=web[0], title=web[1]))
        for web in (chunks or [])
    ]
    candidate = SimpleNamespace(
        grounding_metadata=SimpleNamespace(
            grounding_chunks=web_chunks,
            web_search_queries=queries or [],
        ),
        finish_reason=SimpleNamespace(value="STOP"),
    )
    return SimpleNamespace(
        text=text,
        candidates=[candidate],
        usage_metadata=SimpleNamespace(
            total_token_count=1500,
            prompt_token_count=1000,
            candidates_token_count=500,
        ),
        model_version="gemini-2.5-flash-001",
    )


def api_error(cls, code, message, status):
    return cls(code, {"error": {"code": code, "message": message, "status": status}})


@pytest.fixture
def request_():
    return LLMGenerationRequest(prompt="Analyze this", model="gemini-2.5-flash", temperature=0.1)


@pytest.fixture
def sdk_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=make_sdk_response())
    return client


@pytest.fixture
def patched_genai(sdk_client):
    with patch("threat_inference.llm.gemini_client.genai.Client", return_value=sdk_client) as factory:
        yield factory


class TestResolveApiKey:

    def test_first_non_empty_wins(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "")
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        assert resolve_api_key(("API_KEY", "GEMINI_API_KEY")) == "gem-key"

    def test_missing_returns_empty(self, monkeypatch):
        monkeypatch.delenv("API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert resolve_api_key() == ""


class TestBuildConfig:

    def test_search_tool_and_temperature(self, request_):
        config = GeminiClient.build_config(request_)

        assert config.temperature == pytest.approx(0.1)
        assert len(config.tools) == 1
        assert config.tools[0].google_search is not None

    def test_grounding_disabled(self):
        request = LLMGenerationRequest(
            prompt="p", model="gemini-2.5-flash", search_grounding=False
        )
        assert GeminiClient.build_config(request).tools is None


class TestGenerate:

    @pytest.mark.asyncio
    async def test_successful_generation(self, patched_genai, sdk_client, request_):
        sdk_client.aio.models.generate_content.return_value = make_sdk_response(
            text="```json\n{}\n```",
            chunks=[("https://a.example", "A"), None, ("https://b.example", None)],
            queries=["secure-server-update-88.com reputation"],
        )
        client = GeminiClient(api_key="test-key")

        response = await client.generate(request_)

        assert response.content == "```json\n{}\n```"
        assert response.model_version == "gemini-2.5-flash-001"
        assert response.finish_reason == "stop"
        assert response.prompt_tokens == 1000
        assert response.completion_tokens == 500
        assert response.usage_tokens == 1500
        assert len(response.grounding_chunks) == 3
        assert response.grounding_chunks[0].web.uri == "https://a.example"
        assert response.grounding_chunks[1].web is None
        assert response.grounding_chunks[2].web.title is None
        assert response.raw_metadata["web_search_queries"] == ["secure-server-update-88.com reputation"]

        call = sdk_client.aio.models.generate_content.call_args
        assert call.kwargs["model"] == "gemini-2.5-flash"
        assert call.kwargs["contents"] == "Analyze this"
        assert call.kwargs["config"].tools[0].google_search is not None
        patched_genai.assert_called_once_with(api_key="test-key")

    @pytest.mark.asyncio
    async def test_missing_text_becomes_empty_content(self, patched_genai, sdk_client, request_):
        response = make_sdk_response(text=None)
        response.candidates = []
        sdk_client.aio.models.generate_content.return_value = response

        result = await GeminiClient(api_key="k").generate(request_)

        assert result.content == ""
        assert result.grounding_chunks == []
        assert result.finish_reason == "unknown"

    @pytest.mark.asyncio
    async def test_key_read_from_environment_per_call(
        self, monkeypatch, patched_genai, request_
    ):
        monkeypatch.setenv("API_KEY", "first")
        client = GeminiClient()

        await client.generate(request_)
        await client.generate(request_)
        monkeypatch.setenv("API_KEY", "second")
        await client.generate(request_)

        assert [c.kwargs["api_key"] for c in patched_genai.call_args_list] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_sdk_refusing_empty_key_is_auth_error(self, monkeypatch, request_):
        monkeypatch.delenv("API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        with patch(
            "threat_inference.llm.gemini_client.genai.Client",
            side_effect=ValueError("Missing key inputs argument!"),
        ):
            with pytest.raises(ServiceAuthError):
                await GeminiClient().generate(request_)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error, expected", [
        (lambda: api_error(genai_errors.ClientError, 429, "Resource exhausted", "RESOURCE_EXHAUSTED"),
         ServiceRateLimitError),
        (lambda: api_error(genai_errors.ClientError, 403, "Permission denied", "PERMISSION_DENIED"),
         ServiceAuthError),
        (lambda: api_error(genai_errors.ClientError, 400,
                           "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT"),
         ServiceAuthError),
        (lambda: api_error(genai_errors.ClientError, 404, "models/x is not found", "NOT_FOUND"),
         ServiceModelNotAvailableError),
        (lambda: api_error(genai_errors.ServerError, 503, "Overloaded", "UNAVAILABLE"),
         ServiceUnavailableError),
        (lambda: httpx.ConnectError("Connection refused"), ServiceConnectionError),
        (lambda: httpx.ReadTimeout("Read timed out"), ServiceTimeoutError),
    ])
    async def test_errors_are_translated(self, patched_genai, sdk_client, request_, error, expected):
        sdk_client.aio.models.generate_content.side_effect = error()

        with pytest.raises(expected):
            await GeminiClient(api_key="k").generate(request_)

    @pytest.mark.asyncio
    async def test_other_client_error_is_not_retryable(self, patched_genai, sdk_client, request_):
        sdk_client.aio.models.generate_content.side_effect = api_error(
            genai_errors.ClientError, 400, "Request contains an invalid argument.", "INVALID_ARGUMENT"
        )

        with pytest.raises(ServiceError) as exc_info:
            await GeminiClient(api_key="k").generate(request_)

        assert type(exc_info.value) is ServiceError
        assert exc_info.value.retryable is False
        assert exc_info.value.details["status"] == 400

    @pytest.mark.asyncio
    async def test_timeout(self, patched_genai, sdk_client, request_):
        async def slow(**kwargs):
            await asyncio.sleep(5)

        sdk_client.aio.models.generate_content.side_effect = slow

        with pytest.raises(ServiceTimeoutError) as exc_info:
            await GeminiClient(timeout=0.01, api_key="k").generate(request_)

        assert exc_info.value.retryable is True


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_unknown_sdk_exception_becomes_service_error(
        self, patched_genai, sdk_client, request_
    ):
        sdk_client.aio.models.generate_content.side_effect = RuntimeError("aiohttp session closed")

        with pytest.raises(ServiceError) as exc_info:
            await GeminiClient(api_key="k").generate(request_)

        assert type(exc_info.value) is ServiceError
        assert exc_info.value.retryable is False
        assert exc_info.value.details == {"error_type": "RuntimeError"}
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_malformed_response_object_becomes_service_error(
        self, patched_genai, sdk_client, request_
    ):
        sdk_client.aio.models.generate_content.return_value = SimpleNamespace(text="{}")

        with pytest.raises(ServiceError) as exc_info:
            await GeminiClient(api_key="k").generate(request_)

        assert exc_info.value.details["error_type"] == "AttributeError"


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_close_drops_cached_client(self, patched_genai, request_):
        client = GeminiClient(api_key="k")
        await client.generate(request_)
        await client.close()
        await client.generate(request_)

        assert patched_genai.call_count == 2

    def test_from_settings(self, test_settings):
        client = GeminiClient.from_settings(test_settings)

        assert client.timeout == 0
        assert client.api_key_env_vars == ("API_KEY", "GEMINI_API_KEY")
        assert "API_KEY" in repr(client)
