"""
Abstract base client for LLM inference.

Defines the interface the orchestrator depends on. Tests substitute a mock
with the same interface; production uses GeminiClient.
"""

from abc import ABC, abstractmethod
import structlog

from threat_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send one generation request to the inference service
    - Parse the response into LLMGenerationResponse (text + grounding chunks)
    - Translate provider errors into ServiceError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - JSON extraction / normalization (that's the validation layer's job)
    - Retries (that's RetryEngine's job; a client makes exactly one call)
    """

    def __init__(self, timeout: float = 0, **kwargs):
        """
        Initialize base client.

        Args:
            timeout: Per-call timeout in seconds, 0 disables it
            **kwargs: Additional provider-specific config
        """
        self.timeout = timeout
        self.extra_config = kwargs

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion from the LLM.

        Args:
            request: Standardized generation request

        Returns:
            LLMGenerationResponse with generated text, grounding chunks and metadata

        Raises:
            ServiceConnectionError: Network errors
            ServiceTimeoutError: Call exceeded timeout
            ServiceAuthError: Missing or rejected credentials
            ServiceRateLimitError: Quota exhausted
            ServiceUnavailableError: Server-side failure
            ServiceModelNotAvailableError: Model not found
        """
        pass

    async def close(self):
        """
        Release client resources. Default implementation does nothing.
        """
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout}s)"
