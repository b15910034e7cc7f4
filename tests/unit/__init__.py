"""
Unit tests for the Email Threat Inference Layer.

Test individual components in isolation (no network):
- Data models (score clamping, enum normalization, wire aliases)
- Prompt builder (verbatim embedding, enum literals, request shape)
- Extraction and normalization (stages 1-2, fallback result)
- Gemini client (SDK patched, error translation)
- Retry engine and orchestrator state machine
"""
