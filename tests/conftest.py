"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
import pytest
from pathlib import Path
from typing import Any, Dict

from threat_inference.config import Settings
from threat_inference.models.llm_models import (
    GroundingChunk,
    LLMGenerationResponse,
    WebSource,
)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_RETRIES = 0
    """
    return Settings(
        # === Application ===
        APP_NAME="Email Threat Inference Layer (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Gemini ===
        GEMINI_MODEL="gemini-2.5-flash",
        LLM_TIMEOUT=0,
        LLM_TEMPERATURE=0.1,
        ENABLE_SEARCH_GROUNDING=True,

        # === Retry ===
        MAX_RETRIES=0,
        RETRY_BACKOFF_BASE=2.0,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def phishing_email(fixtures_dir: Path) -> str:
    """Raw phishing email with a 1x1 tracking pixel and a <script> redirect."""
    return (fixtures_dir / "phishing_email.eml").read_text(encoding="utf-8")


@pytest.fixture
def newsletter_email(fixtures_dir: Path) -> str:
    """Legitimate marketing newsletter with an unsubscribe link."""
    return (fixtures_dir / "newsletter_email.txt").read_text(encoding="utf-8")


@pytest.fixture
def valid_result_data(fixtures_dir: Path) -> Dict[str, Any]:
    """Valid model output (camelCase wire format) as dict."""
    with open(fixtures_dir / "valid_model_response.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def valid_result_json(valid_result_data: Dict[str, Any]) -> str:
    """Valid model output serialized as the model would send it."""
    return json.dumps(valid_result_data, indent=2)


@pytest.fixture
def make_llm_response():
    """Factory fixture to create LLMGenerationResponse with custom content and chunks.

    Usage:
        def test_something(make_llm_response):
            response = make_llm_response(content="{...}", chunks=[("a", "A")])
    """
    def _create(
        content: str = "",
        chunks: list[tuple[str | None, str | None]] | None = None,
        model_version: str = "gemini-2.5-flash",
    ) -> LLMGenerationResponse:
        grounding = [
            GroundingChunk(web=WebSource(uri=uri, title=title))
            for uri, title in (chunks or [])
        ]
        return LLMGenerationResponse(
            content=content,
            grounding_chunks=grounding,
            model_version=model_version,
            finish_reason="stop",
            usage_tokens=1800,
            prompt_tokens=1200,
            completion_tokens=600,
            latency_ms=2400,
        )

    return _create
