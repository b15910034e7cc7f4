"""
Prompt builder for LLM requests.

Responsible for:
- Loading and rendering the Jinja2 analysis template
- Embedding the untrusted email verbatim inside delimited markers
- Rendering the output schema with the exact enum literals the normalizer accepts
- Constructing the complete LLMGenerationRequest (model, temperature, grounding)

compile() is a pure function of its input: same email text, same prompt.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined
import structlog

from threat_inference.config import Settings
from threat_inference.llm.text_utils import count_tokens_approximate
from threat_inference.models.enums import SpamCategory, UrgencyLevel, Verdict
from threat_inference.models.llm_models import LLMGenerationRequest


logger = structlog.get_logger(__name__)


DANGEROUS_TAGS = ("<script>", "<iframe>", "<object>", "<embed>")
DANGEROUS_EXTENSIONS = (
    ".exe", ".scr", ".vbs", ".js", ".bat", ".cmd", ".ps1", ".jar", ".iso", ".hta", ".lnk",
)
RISK_DIMENSIONS = (
    ("technical", "header anomalies, authentication failures, suspicious links, scripts and payloads"),
    ("content", "deceptive wording, credential or payment requests, impersonated brands"),
    ("social", "manipulation tactics: urgency, fear, authority, reward"),
    ("reputation", "sender domain and linked domains reputation as found by web search"),
)


class PromptBuilder:
    """
    Build the analysis prompt from raw email text.

    Handles:
    - Template rendering (Jinja2, no autoescape: HTML in the email is kept verbatim)
    - Enum literals for verdict, spam category and urgency level
    - LLMGenerationRequest construction from settings
    """

    def __init__(
        self,
        templates_dir: Path,
        template_name: str = "analysis_prompt.txt",
        default_model: str = "gemini-2.5-flash",
        default_temperature: float = 0.1,
        search_grounding: bool = True,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing the prompt template
            template_name: File name of the analysis template
            default_model: Model name put on every request
            default_temperature: Sampling temperature (low: favor deterministic classification)
            search_grounding: Whether requests enable the web-search tool
        """
        self.templates_dir = Path(templates_dir)
        self.template_name = template_name
        self.default_model = default_model
        self.default_temperature = default_temperature
        self.search_grounding = search_grounding

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # We're generating prompts, not HTML
            undefined=StrictUndefined,
        )

        try:
            self.template = self.jinja_env.get_template(self.template_name)
            logger.info(
                "Loaded prompt template",
                templates_dir=str(self.templates_dir),
                template_name=self.template_name,
            )
        except Exception as e:
            logger.error("Failed to load prompt template", error=str(e))
            raise

    @classmethod
    def from_settings(cls, settings: Settings) -> "PromptBuilder":
        return cls(
            templates_dir=Path(settings.PROMPT_TEMPLATES_DIR),
            template_name=settings.PROMPT_TEMPLATE_NAME,
            default_model=settings.GEMINI_MODEL,
            default_temperature=settings.LLM_TEMPERATURE,
            search_grounding=settings.ENABLE_SEARCH_GROUNDING,
        )

    def compile(self, email_text: str) -> str:
        """
        Render the instruction prompt for one email.

        Args:
            email_text: Raw, untrusted email content (embedded verbatim)

        Returns:
            Rendered prompt as string
        """
        prompt = self.template.render(
            email_text=email_text,
            verdicts=[v.value for v in Verdict],
            spam_categories=[c.value for c in SpamCategory],
            urgency_levels=[u.value for u in UrgencyLevel],
            dangerous_tags=DANGEROUS_TAGS,
            dangerous_extensions=DANGEROUS_EXTENSIONS,
            risk_dimensions=RISK_DIMENSIONS,
        ).strip()

        logger.debug(
            "Compiled analysis prompt",
            email_length=len(email_text),
            prompt_length=len(prompt),
            approx_tokens=count_tokens_approximate(prompt),
        )
        return prompt

    def build_request(self, email_text: str) -> LLMGenerationRequest:
        """Compile the prompt and wrap it with model settings."""
        return LLMGenerationRequest(
            prompt=self.compile(email_text),
            model=self.default_model,
            temperature=self.default_temperature,
            search_grounding=self.search_grounding,
        )
