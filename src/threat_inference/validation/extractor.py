"""
Stage 0: JSON candidate extraction.

The model is asked for raw JSON but may still wrap it in markdown fences or
surround it with prose. The extractor isolates the span from the first ``{``
to the last ``}``.

This is a heuristic, not a parser. It assumes one top-level object and no
braces in the surrounding prose; nested braces inside the object are fine.
Prose containing a stray ``{`` before the payload or ``}`` after it widens
the span, the candidate then fails to parse and the normalizer falls back.
When several JSON-like objects appear, the outermost span wins.
"""

import structlog


logger = structlog.get_logger(__name__)


class ResponseExtractor:
    """Locate the JSON substring inside arbitrary model text."""

    def extract(self, raw_text: str | None) -> str | None:
        """
        Extract the JSON candidate.

        Args:
            raw_text: Free-form model output

        Returns:
            The inclusive ``{...}`` span when a first ``{`` precedes a last ``}``,
            otherwise the full raw text (best effort). None for empty input.
        """
        if not raw_text:
            return None

        start = raw_text.find("{")
        end = raw_text.rfind("}")

        if start != -1 and end > start:
            candidate = raw_text[start:end + 1]
            logger.debug(
                "Extracted JSON candidate",
                raw_length=len(raw_text),
                candidate_length=len(candidate),
                trimmed=len(raw_text) - len(candidate),
            )
            return candidate

        logger.debug("No brace-delimited span found, using full text", raw_length=len(raw_text))
        return raw_text
