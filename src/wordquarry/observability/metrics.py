"""
Defines Prometheus metrics for word extraction runs.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (e.g. across a test session) must not register the
# same collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        # prometheus_client registers counters under the name without the _total suffix
        for candidate in (name, name.removesuffix("_total")):
            existing = _PROM_REGISTRY._names_to_collectors.get(candidate)
            if existing is not None:
                return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name.removesuffix("_total")]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]

DOCUMENT_OUTCOMES = ("processed", "skipped", "failed")

METRICS: Dict[str, Any] = {
    "documents": Counter(
        "wordquarry_documents_total",
        "Documents seen by the word extractor, by outcome",
        ["outcome"],
    ),
    "words_extracted": Counter(
        "wordquarry_words_extracted_total",
        "Token matches inserted into the result set (before deduplication)",
    ),
}


def record_document(outcome: str) -> None:
    """Count one document with the given outcome."""
    if outcome not in DOCUMENT_OUTCOMES:
        raise ValueError(f"Unknown document outcome: {outcome}")
    METRICS["documents"].labels(outcome=outcome).inc()


def record_words(count: int) -> None:
    """Count token matches produced by one document."""
    if count:
        METRICS["words_extracted"].inc(count)
