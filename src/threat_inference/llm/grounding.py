"""
Grounding source mapping.

Projects the grounding chunks of a model response onto GroundingSource
citations. Only chunks carrying both a non-empty URI and a non-empty title
survive; the rest are dropped silently. Service order is preserved and no
deduplication is performed.
"""

import structlog

from threat_inference.models.llm_models import GroundingChunk, LLMGenerationResponse
from threat_inference.models.output_models import GroundingSource


logger = structlog.get_logger(__name__)


class GroundingSourceMapper:
    """Filter grounding chunks and project them to citation records."""

    @staticmethod
    def _is_citable(chunk: GroundingChunk) -> bool:
        web = chunk.web
        if web is None:
            return False
        return bool(web.uri and web.uri.strip()) and bool(web.title and web.title.strip())

    def map(self, response: LLMGenerationResponse) -> list[GroundingSource]:
        """
        Extract citation sources from a model response.

        Args:
            response: Raw model response with grounding chunks

        Returns:
            GroundingSource list in upstream order (possibly empty)
        """
        sources = [
            GroundingSource(title=chunk.web.title, uri=chunk.web.uri)
            for chunk in response.grounding_chunks
            if self._is_citable(chunk)
        ]
        logger.debug(
            "Mapped grounding sources",
            chunks=len(response.grounding_chunks),
            sources=len(sources),
        )
        return sources
