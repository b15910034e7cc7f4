"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import pytest
from unittest.mock import AsyncMock

from threat_inference.llm.base_client import BaseLLMClient
from threat_inference.llm.grounding import GroundingSourceMapper
from threat_inference.llm.prompt_builder import PromptBuilder
from threat_inference.orchestrator import AnalysisOrchestrator
from threat_inference.retry.engine import RetryEngine
from threat_inference.validation.normalizer import ResultNormalizer


@pytest.fixture
def mock_llm_client(make_llm_response, valid_result_json):
    """Mock LLM client returning a fenced, prose-wrapped valid result with two sources."""
    mock = AsyncMock(spec=BaseLLMClient)
    mock.generate = AsyncMock(return_value=make_llm_response(
        content=f"Here is the analysis:\n```json\n{valid_result_json}\n```\nStay safe.",
        chunks=[
            ("https://www.example-threatintel.com/report/88", "Threat report: secure-server-update-88.com"),
            ("https://learn.microsoft.com/phishing", "Protect yourself from phishing"),
        ],
    ))
    mock.close = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def prompt_builder(test_settings) -> PromptBuilder:
    """Real PromptBuilder over the packaged template."""
    return PromptBuilder.from_settings(test_settings)


@pytest.fixture
def normalizer(test_settings) -> ResultNormalizer:
    """Real ResultNormalizer over the packaged schema."""
    return ResultNormalizer.from_settings(test_settings)


@pytest.fixture
def no_sleep():
    """Async sleep replacement recording requested backoffs."""
    return AsyncMock(return_value=None)


@pytest.fixture
def make_orchestrator(prompt_builder, normalizer, no_sleep):
    """Factory fixture wiring an orchestrator around a given client.

    Usage:
        def test_something(make_orchestrator, mock_llm_client):
            orchestrator = make_orchestrator(mock_llm_client, max_retries=2)
    """
    def _create(llm_client, max_retries: int = 0) -> AnalysisOrchestrator:
        return AnalysisOrchestrator(
            llm_client=llm_client,
            prompt_builder=prompt_builder,
            normalizer=normalizer,
            grounding_mapper=GroundingSourceMapper(),
            retry_engine=RetryEngine(max_retries=max_retries, sleep=no_sleep),
        )

    return _create
