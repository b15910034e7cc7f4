"""Integration test fixtures (service checks and prerequisites).

Integration tests talk to the real Gemini API and are skipped unless an API
key is present in the environment.
"""

import pytest
import pytest_asyncio

from threat_inference.config import Settings
from threat_inference.llm.gemini_client import resolve_api_key
from threat_inference.orchestrator import create_orchestrator


@pytest.fixture(scope="session")
def check_gemini_key():
    """Skip tests when no Gemini API key is configured."""
    if not resolve_api_key(Settings().API_KEY_ENV_VARS):
        pytest.skip("Gemini API key not set (API_KEY / GEMINI_API_KEY)")


@pytest.fixture
def live_settings(check_gemini_key) -> Settings:
    """Default settings with a couple of retries for flaky networks."""
    return Settings(MAX_RETRIES=2, LLM_TIMEOUT=120, PROMETHEUS_ENABLED=False)


@pytest_asyncio.fixture
async def live_orchestrator(live_settings):
    """Real orchestrator wired to Gemini.

    Requires an API key (checked by check_gemini_key fixture).
    """
    orchestrator = create_orchestrator(live_settings)
    yield orchestrator
    await orchestrator.close()
