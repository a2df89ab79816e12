"""Deterministic metric synthesis keyed by blood test id.

The same id always yields the same panel. The seed is a plain sum of
character codes, so unrelated ids may collide; reproducibility is the only
guarantee.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from bloodreport.services.metric_catalog import DEFAULT_CATALOG, MetricSpec, classify

SEED_MODE_PER_METRIC = "per_metric"
SEED_MODE_LEGACY = "legacy"
SEED_MODES = (SEED_MODE_PER_METRIC, SEED_MODE_LEGACY)


@dataclass(frozen=True)
class Metric:
    name: str
    value: float
    unit: str
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def seed_from_id(test_id: str) -> int:
    return sum(ord(ch) for ch in (test_id or ""))


def seeded_fraction(seed: int) -> float:
    """Return frac(sin(seed) * 10000), always in [0, 1)."""
    x = math.sin(seed) * 10000
    frac = x - math.floor(x)
    # floor of a tiny negative number can round the difference up to 1.0
    if frac >= 1.0:
        return 0.0
    return frac


def _synthesize_one(spec: MetricSpec, frac: float) -> Metric:
    value = round(spec.base_value + frac * spec.spread, spec.precision)
    return Metric(
        name=spec.name,
        value=value,
        unit=spec.unit,
        status=classify(value, spec.low, spec.high),
    )


def synthesize_metrics(
    test_id: str,
    catalog: Tuple[MetricSpec, ...] = DEFAULT_CATALOG,
    seed_mode: str = SEED_MODE_PER_METRIC,
) -> Tuple[Metric, ...]:
    """Build the catalog-ordered metric panel for ``test_id``.

    ``per_metric`` hashes ``seed + index`` so each entry gets its own offset;
    ``legacy`` hashes the bare seed once and applies that single fraction to
    every entry. The first entry is identical in both modes.
    """
    seed = seed_from_id(test_id)
    if seed_mode == SEED_MODE_LEGACY:
        frac = seeded_fraction(seed)
        return tuple(_synthesize_one(spec, frac) for spec in catalog)
    return tuple(
        _synthesize_one(spec, seeded_fraction(seed + index))
        for index, spec in enumerate(catalog)
    )


__all__ = [
    "Metric",
    "SEED_MODES",
    "SEED_MODE_LEGACY",
    "SEED_MODE_PER_METRIC",
    "seed_from_id",
    "seeded_fraction",
    "synthesize_metrics",
]
