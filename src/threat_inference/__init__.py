"""
Email Threat Inference Layer.

Turns raw email content into a structured threat assessment:
- Verdict (SAFE / SUSPICIOUS / MALICIOUS) with risk score and confidence
- Spam / marketing classification
- Passive (zero-click) threat detection
- Four risk dimensions (technical, content, social, reputation)
- Web-grounded verification with citation sources

Architecture: PromptBuilder -> GeminiClient (Google Search grounding)
-> ResponseExtractor -> ResultNormalizer -> GroundingSourceMapper,
sequenced by AnalysisOrchestrator.
"""

__version__ = "0.1.0"
