"""
Configuration settings for the Email Threat Inference Layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.

NOTE: the Gemini API key is deliberately NOT a settings field. It is read from
the environment at invocation time (see GeminiClient), using the variable
names listed in API_KEY_ENV_VARS.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Email Threat Inference Layer"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Gemini Configuration ===
    GEMINI_MODEL: str = "gemini-2.5-flash"
    API_KEY_ENV_VARS: list[str] = ["API_KEY", "GEMINI_API_KEY"]  # First non-empty wins
    LLM_TIMEOUT: float = 0  # seconds, 0 = wait for the service

    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.1  # Low for deterministic classification
    ENABLE_SEARCH_GROUNDING: bool = True

    # === Retry ===
    MAX_RETRIES: int = 0  # Opt-in additional attempts on transient service errors
    RETRY_BACKOFF_BASE: float = 2.0  # Exponential backoff multiplier
    RETRY_BACKOFF_MAX: float = 30.0  # seconds

    # === Prompt & Validation ===
    PROMPT_TEMPLATES_DIR: str = str(PACKAGE_DIR / "prompts")
    PROMPT_TEMPLATE_NAME: str = "analysis_prompt.txt"
    JSON_SCHEMA_PATH: str = str(PACKAGE_DIR / "schemas" / "analysis_result.schema.json")
    FALLBACK_EXCERPT_CHARS: int = 100  # Raw text included in fallback summary
    PREVIEW_CHARS: int = 80  # Email preview attached to each outcome

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True
    METRICS_PORT: int = 9464  # Exposition port used by bootstrap()


# Global settings instance
settings = Settings()
