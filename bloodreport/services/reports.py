"""Assemble report payloads from stored blood test records."""
from __future__ import annotations

from typing import Any, Dict, Tuple

from bloodreport.services.analysis import analyze_metrics
from bloodreport.services.health_score import DEFAULT_POLICY, ScoringPolicy, health_score_for
from bloodreport.services.metric_catalog import DEFAULT_CATALOG, MetricSpec
from bloodreport.services.metrics import SEED_MODE_PER_METRIC, Metric, synthesize_metrics


class ReportNotReady(Exception):
    """Raised when a report is requested for a test that is not processed yet."""


def _metrics_for(
    test: Any,
    catalog: Tuple[MetricSpec, ...],
    seed_mode: str,
) -> Tuple[Metric, ...]:
    if not getattr(test, "processed", False):
        raise ReportNotReady(str(getattr(test, "id", "")))
    return synthesize_metrics(str(test.id), catalog, seed_mode)


def build_report(
    test: Any,
    catalog: Tuple[MetricSpec, ...] = DEFAULT_CATALOG,
    seed_mode: str = SEED_MODE_PER_METRIC,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> Dict[str, Any]:
    metrics = _metrics_for(test, catalog, seed_mode)
    score = health_score_for(str(test.id), test.created_at, metrics, policy)
    return {
        "id": str(test.id),
        "date": score.date,
        "name": test.file_name,
        "metrics": [m.to_dict() for m in metrics],
        "health_score": score.score,
    }


def build_analysis(
    test: Any,
    catalog: Tuple[MetricSpec, ...] = DEFAULT_CATALOG,
    seed_mode: str = SEED_MODE_PER_METRIC,
) -> Dict[str, Any]:
    return analyze_metrics(_metrics_for(test, catalog, seed_mode))


def score_entry(
    test: Any,
    catalog: Tuple[MetricSpec, ...] = DEFAULT_CATALOG,
    seed_mode: str = SEED_MODE_PER_METRIC,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> Dict[str, Any]:
    # Unprocessed tests have no panel yet; the id-based fallback keeps the trend usable.
    metrics = synthesize_metrics(str(test.id), catalog, seed_mode) if test.processed else ()
    score = health_score_for(str(test.id), test.created_at, metrics, policy)
    return {"test_id": str(test.id), "date": score.date, "score": score.score}


__all__ = [
    "ReportNotReady",
    "build_analysis",
    "build_report",
    "score_entry",
]
