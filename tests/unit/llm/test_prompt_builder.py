"""Unit tests for PromptBuilder."""

import pytest

from threat_inference.llm.prompt_builder import (
    DANGEROUS_EXTENSIONS,
    DANGEROUS_TAGS,
    PromptBuilder,
)
from threat_inference.models.llm_models import LLMGenerationRequest


def test_compile_is_deterministic(prompt_builder, phishing_email):
    assert prompt_builder.compile(phishing_email) == prompt_builder.compile(phishing_email)


def test_email_embedded_verbatim_between_markers(prompt_builder, phishing_email):
    prompt = prompt_builder.compile(phishing_email)

    start = prompt.index("<<<EMAIL_CONTENT_START>>>")
    end = prompt.index("<<<EMAIL_CONTENT_END>>>")
    assert start < end
    embedded = prompt[start + len("<<<EMAIL_CONTENT_START>>>"):end]
    assert embedded.strip("\n") == phishing_email.strip("\n")


def test_html_is_not_escaped(prompt_builder):
    email = '<img src="http://tracker.example/p.gif" width="1" height="1"><script>go()</script>'
    prompt = prompt_builder.compile(email)

    assert email in prompt
    assert "&lt;script&gt;" not in prompt


def test_template_syntax_in_email_is_not_rendered(prompt_builder):
    email = "Hello {{ email_text }} {% if x %}boom{% endif %}"
    prompt = prompt_builder.compile(email)
    assert email in prompt


def test_prompt_lists_all_analysis_tasks(prompt_builder):
    prompt = prompt_builder.compile("Hi")

    for heading in (
        "PHISHING INDICATORS",
        "SPAM CLASSIFICATION",
        "PASSIVE THREATS",
        "RISK DIMENSIONS",
        "WEB VERIFICATION",
        "VERDICT",
    ):
        assert heading in prompt


def test_prompt_mentions_decoding_before_reasoning(prompt_builder):
    prompt = prompt_builder.compile("Hi")
    assert "Base64" in prompt
    assert "MIME" in prompt
    assert "Decode" in prompt


def test_prompt_names_passive_threat_indicators(prompt_builder):
    prompt = prompt_builder.compile("Hi")

    assert "1x1" in prompt
    for tag in DANGEROUS_TAGS:
        assert tag in prompt
    for extension in DANGEROUS_EXTENSIONS:
        assert extension in prompt


def test_prompt_carries_exact_enum_literals(prompt_builder):
    prompt = prompt_builder.compile("Hi")

    assert '"SAFE" | "SUSPICIOUS" | "MALICIOUS"' in prompt
    assert '"LEGITIMATE" | "MARKETING" | "NEWSLETTER" | "SCAM" | "UNKNOWN"' in prompt
    assert '"LOW" | "MEDIUM" | "HIGH"' in prompt


def test_prompt_describes_output_schema(prompt_builder):
    prompt = prompt_builder.compile("Hi")

    for key in (
        '"riskScore"', '"spamAnalysis"', '"riskDimensions"', '"technicalAnalysis"',
        '"passiveAnalysis"', '"hasScriptsOrIframes"', '"socialEngineering"',
        '"webIntelligence"', '"recommendations"',
    ):
        assert key in prompt
    assert '"reputation": integer (0-100)\n' in prompt
    assert "No markdown fences" in prompt


def test_build_request_uses_configured_model(prompt_builder, test_settings):
    request = prompt_builder.build_request("Hi")

    assert isinstance(request, LLMGenerationRequest)
    assert request.model == test_settings.GEMINI_MODEL
    assert request.temperature == pytest.approx(0.1)
    assert request.search_grounding is True
    assert "<<<EMAIL_CONTENT_START>>>\nHi\n<<<EMAIL_CONTENT_END>>>" in request.prompt


def test_build_request_without_grounding(test_settings):
    builder = PromptBuilder(
        templates_dir=test_settings.PROMPT_TEMPLATES_DIR,
        default_model="gemini-2.5-pro",
        default_temperature=0.0,
        search_grounding=False,
    )
    request = builder.build_request("Hi")

    assert request.model == "gemini-2.5-pro"
    assert request.temperature == 0.0
    assert request.search_grounding is False


def test_missing_template_raises(tmp_path):
    with pytest.raises(Exception):
        PromptBuilder(templates_dir=tmp_path, template_name="nope.txt")
