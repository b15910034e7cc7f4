"""Custom Prometheus metrics for the Email Threat Inference Layer.

Exposition (``prometheus_client.start_http_server`` or an ASGI app) is left
to the embedding process. Alert rules should be configured for:
- fallback_results_total (model output drifting away from the JSON contract)
- analyses_total{outcome="failed"} (Gemini outages, quota, bad credentials)
- retries_total (high retry rate indicates service instability)
"""

from prometheus_client import Counter, Histogram

# === Orchestration Metrics ===

analyses_total = Counter(
    "threat_analyses_total",
    "Total analyze() calls by outcome",
    ["outcome"],
)
"""
Labels:
- outcome: succeeded, failed, skipped (blank input), rejected (already running)
"""

verdict_distribution_total = Counter(
    "threat_verdict_distribution_total",
    "Total completed analyses by verdict",
    ["verdict"],
)

# === Validation Metrics ===

validation_failures_total = Counter(
    "threat_validation_failures_total",
    "Total validation failures by stage and error type",
    ["stage", "error_type"],
)
"""
Labels:
- stage: stage1 (JSON parse), stage2 (schema), model (pydantic)
- error_type: empty_content, json_decode_error, not_json_object, schema_violation, ...
"""

fallback_results_total = Counter(
    "threat_fallback_results_total",
    "Total fallback results substituted for unparseable model output",
    ["reason"],
)
"""
Alert thresholds:
- WARN: rate > 5% of succeeded analyses
"""

# === Retry Metrics ===

retries_total = Counter(
    "threat_retries_total",
    "Total retry attempts after transient service errors",
    ["error_type"],
)

# === LLM Metrics ===

llm_latency_seconds = Histogram(
    "threat_llm_latency_seconds",
    "Gemini generate_content latency in seconds",
    ["model", "success"],
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, 120),
)

llm_tokens_total = Counter(
    "threat_llm_tokens_total",
    "Total tokens consumed by type",
    ["model", "token_type"],
)

grounding_sources_total = Counter(
    "threat_grounding_sources_total",
    "Total grounding sources returned to callers",
)
