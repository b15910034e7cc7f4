"""
Integration tests for the Email Threat Inference Layer.

Run against the live Gemini API (marked with @pytest.mark.integration) and
skipped when no API key is configured.
"""
