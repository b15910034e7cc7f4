"""
Analysis orchestrator: one atomic analyze(text) operation.

Sequence per call:
    PromptBuilder.build_request -> RetryEngine(GeminiClient.generate)
    -> ResultNormalizer.normalize_response (extract + parse + clamp / fallback)
    -> GroundingSourceMapper.map

State machine:
    IDLE -> RUNNING -> {SUCCEEDED, FAILED} -> IDLE

- Blank input is a no-op: the model is never called, result/sources are kept.
- A call while RUNNING is rejected with AnalysisInProgressError.
- Starting an analysis clears the previous result/sources eagerly.
- Success replaces result and sources together, even when the result is the
  degraded fallback.
- ServiceError leaves result/sources cleared and is re-raised to the caller.

The RUNNING guard is checked and set before the first await, so within one
event loop it is a mutex without a lock.
"""

from prometheus_client import start_http_server
import structlog

from threat_inference.config import Settings, settings as default_settings
from threat_inference.llm.base_client import BaseLLMClient
from threat_inference.llm.exceptions import ServiceError
from threat_inference.llm.gemini_client import GeminiClient
from threat_inference.llm.grounding import GroundingSourceMapper
from threat_inference.llm.prompt_builder import PromptBuilder
from threat_inference.logging_config import configure_logging
from threat_inference.models.enums import AnalysisState
from threat_inference.models.input_models import AnalysisRequest
from threat_inference.models.output_models import AnalysisOutcome, AnalysisResult, GroundingSource
from threat_inference.monitoring.metrics import (
    analyses_total,
    grounding_sources_total,
    verdict_distribution_total,
)
from threat_inference.retry.engine import RetryEngine
from threat_inference.validation.normalizer import ResultNormalizer

logger = structlog.get_logger(__name__)


class AnalysisInProgressError(Exception):
    """Raised when analyze() is called while another analysis is running."""


class AnalysisOrchestrator:
    """
    Owns the current analysis: state, result and grounding sources.

    The presentation layer reads ``result`` / ``sources`` (or the returned
    AnalysisOutcome) and never mutates them.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: PromptBuilder,
        normalizer: ResultNormalizer,
        grounding_mapper: GroundingSourceMapper | None = None,
        retry_engine: RetryEngine | None = None,
        preview_chars: int = 80,
    ):
        """
        Initialize the orchestrator.

        Args:
            llm_client: Model invoker
            prompt_builder: Prompt compiler
            normalizer: Result normalizer (owns the response extractor)
            grounding_mapper: Grounding source mapper
            retry_engine: Retry policy around the model call (default: no retries)
            preview_chars: Length of the email preview attached to each outcome
        """
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.normalizer = normalizer
        self.grounding_mapper = grounding_mapper or GroundingSourceMapper()
        self.retry_engine = retry_engine or RetryEngine(max_retries=0)
        self.preview_chars = preview_chars

        self._state = AnalysisState.IDLE
        self._last_status: AnalysisState | None = None
        self._result: AnalysisResult | None = None
        self._sources: list[GroundingSource] = []
        self._last_outcome: AnalysisOutcome | None = None

    # --- read-only view for the presentation layer ---

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is AnalysisState.RUNNING

    @property
    def last_status(self) -> AnalysisState | None:
        """SUCCEEDED or FAILED for the last attempt, None before the first one."""
        return self._last_status

    @property
    def result(self) -> AnalysisResult | None:
        return self._result

    @property
    def sources(self) -> list[GroundingSource]:
        return list(self._sources)

    @property
    def last_outcome(self) -> AnalysisOutcome | None:
        return self._last_outcome

    # --- operations ---

    def reset(self) -> None:
        """Discard the current result and sources (e.g. when new input is loaded)."""
        if self.is_running:
            raise AnalysisInProgressError("Cannot reset while an analysis is running")
        self._result = None
        self._sources = []
        self._last_outcome = None

    async def analyze(self, email_text: str | None) -> AnalysisOutcome | None:
        """
        Analyze one email.

        Args:
            email_text: Raw email content as pasted by the user

        Returns:
            AnalysisOutcome, or None when the input is blank (no-op)

        Raises:
            AnalysisInProgressError: Another analysis is running
            ServiceError: The model call failed (after retries, if configured)
        """
        if AnalysisRequest.is_blank(email_text):
            analyses_total.labels(outcome="skipped").inc()
            logger.debug("Blank input, analysis skipped")
            return None

        if self.is_running:
            analyses_total.labels(outcome="rejected").inc()
            logger.warning("Analysis already running, request rejected")
            raise AnalysisInProgressError("An analysis is already in progress")

        request = AnalysisRequest(email_text=email_text)

        self._result = None
        self._sources = []
        self._last_outcome = None
        self._state = AnalysisState.RUNNING

        log = logger.bind(email_length=len(request.email_text))
        log.info("Analysis started")

        try:
            llm_request = self.prompt_builder.build_request(request.email_text)

            response, retry_metadata = await self.retry_engine.execute(
                lambda: self.llm_client.generate(llm_request)
            )

            result, degraded = self.normalizer.normalize_response(response)
            sources = self.grounding_mapper.map(response)

            outcome = AnalysisOutcome(
                result=result,
                sources=sources,
                degraded=degraded,
                attempts=retry_metadata.total_attempts,
                preview=request.preview(self.preview_chars),
            )

            self._result = result
            self._sources = sources
            self._last_outcome = outcome
            self._last_status = AnalysisState.SUCCEEDED

        except ServiceError as e:
            self._last_status = AnalysisState.FAILED
            analyses_total.labels(outcome="failed").inc()
            log.error(
                "Analysis failed",
                error_type=type(e).__name__,
                error=e.message,
                details=e.details,
            )
            raise

        finally:
            self._state = AnalysisState.IDLE

        analyses_total.labels(outcome="succeeded").inc()
        verdict_distribution_total.labels(verdict=result.verdict.value).inc()
        grounding_sources_total.inc(len(sources))
        log.info(
            "Analysis completed",
            verdict=result.verdict.value,
            risk_score=result.risk_score,
            confidence=result.confidence,
            degraded=degraded,
            sources=len(sources),
            attempts=retry_metadata.total_attempts,
        )
        return outcome

    async def close(self) -> None:
        await self.llm_client.close()

    async def __aenter__(self) -> "AnalysisOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def create_orchestrator(settings: Settings | None = None) -> AnalysisOrchestrator:
    """Wire the default Gemini-backed pipeline from settings."""
    settings = settings or default_settings
    return AnalysisOrchestrator(
        llm_client=GeminiClient.from_settings(settings),
        prompt_builder=PromptBuilder.from_settings(settings),
        normalizer=ResultNormalizer.from_settings(settings),
        grounding_mapper=GroundingSourceMapper(),
        retry_engine=RetryEngine.from_settings(settings),
        preview_chars=settings.PREVIEW_CHARS,
    )


def bootstrap(settings: Settings | None = None) -> AnalysisOrchestrator:
    """
    Process startup for an embedding application.

    Configures logging, exposes Prometheus metrics on METRICS_PORT when
    PROMETHEUS_ENABLED, and returns the default orchestrator. Call once.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    if settings.PROMETHEUS_ENABLED:
        start_http_server(settings.METRICS_PORT)
        logger.info("Prometheus metrics exposed", port=settings.METRICS_PORT)

    logger.info(
        "Email threat inference ready",
        version=settings.APP_VERSION,
        model=settings.GEMINI_MODEL,
        max_retries=settings.MAX_RETRIES,
    )
    return create_orchestrator(settings)
