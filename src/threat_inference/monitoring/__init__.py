"""Monitoring and metrics instrumentation for the Email Threat Inference Layer.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from threat_inference.monitoring.metrics import (
    analyses_total,
    fallback_results_total,
    grounding_sources_total,
    llm_latency_seconds,
    llm_tokens_total,
    retries_total,
    validation_failures_total,
    verdict_distribution_total,
)

__all__ = [
    "analyses_total",
    "verdict_distribution_total",
    "validation_failures_total",
    "fallback_results_total",
    "retries_total",
    "llm_latency_seconds",
    "llm_tokens_total",
    "grounding_sources_total",
]
