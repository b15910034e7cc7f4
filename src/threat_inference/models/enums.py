"""
Enumerations for Email Threat Inference data models.

All enums are closed taxonomies - no values outside these sets are permitted.
Their literal values are rendered into the prompt, so the model is asked for
exactly the strings accepted here.
"""

from enum import Enum


class Verdict(str, Enum):
    """
    Coarse three-level classification of overall maliciousness.

    Ordered from benign to malicious (can be used for ordinal comparisons).
    """

    SAFE = "SAFE"
    SUSPICIOUS = "SUSPICIOUS"
    MALICIOUS = "MALICIOUS"

    @classmethod
    def get_ordinal(cls, verdict: "Verdict") -> int:
        """Get ordinal value for verdict (0=safe, 1=suspicious, 2=malicious)."""
        order = [cls.SAFE, cls.SUSPICIOUS, cls.MALICIOUS]
        return order.index(verdict)


class SpamCategory(str, Enum):
    """Spam / bulk-mail category. UNKNOWN when the model cannot decide."""

    LEGITIMATE = "LEGITIMATE"
    MARKETING = "MARKETING"
    NEWSLETTER = "NEWSLETTER"
    SCAM = "SCAM"
    UNKNOWN = "UNKNOWN"


class UrgencyLevel(str, Enum):
    """Pressure applied on the reader by social-engineering tactics."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AnalysisState(str, Enum):
    """
    Orchestrator lifecycle.

    IDLE -> RUNNING -> {SUCCEEDED, FAILED} -> IDLE. SUCCEEDED and FAILED are
    recorded as the status of the last attempt; the orchestrator itself is
    back in IDLE as soon as analyze() returns or raises.
    """

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
