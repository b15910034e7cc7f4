"""
Input data models for the Email Threat Inference Layer.

The input is deliberately minimal: free text pasted by the user. It may be a
full RFC 822 message (headers, MIME boundaries, Base64 parts, HTML) or just a
body; the prompt asks the model to decode it, nothing is parsed here.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalysisRequest(BaseModel):
    """
    One analysis request. Ephemeral: created per invocation, never persisted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    email_text: str = Field(..., description="Raw, untrusted email content")

    @field_validator("email_text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("email_text must not be blank")
        return value

    @staticmethod
    def is_blank(text: str | None) -> bool:
        """True for None, empty or whitespace-only input (analysis is a no-op)."""
        return text is None or not text.strip()

    def preview(self, max_chars: int = 80) -> str:
        """Single-line excerpt of the email for display next to a result."""
        flattened = " ".join(self.email_text.split())
        if len(flattened) <= max_chars:
            return flattened
        return flattened[:max_chars].rstrip() + "..."
