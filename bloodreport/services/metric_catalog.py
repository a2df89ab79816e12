"""Fixed biomarker panel used to synthesize report metrics."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

NORMAL = "normal"
ELEVATED = "elevated"
LOW = "low"


@dataclass(frozen=True)
class MetricSpec:
    name: str
    base_value: float
    spread: float
    low: float
    high: float
    unit: str
    precision: int = 1


# Order matters: reports list metrics in exactly this order.
DEFAULT_CATALOG: Tuple[MetricSpec, ...] = (
    MetricSpec("Hemoglobin", 12.0, 6.0, 13.5, 17.5, "g/dL"),
    MetricSpec("Glucose", 65.0, 50.0, 70.0, 100.0, "mg/dL", 0),
    MetricSpec("Total Cholesterol", 140.0, 100.0, 125.0, 200.0, "mg/dL", 0),
    MetricSpec("LDL Cholesterol", 60.0, 90.0, 50.0, 130.0, "mg/dL", 0),
    MetricSpec("HDL Cholesterol", 35.0, 40.0, 40.0, 90.0, "mg/dL", 0),
    MetricSpec("Triglycerides", 60.0, 140.0, 40.0, 150.0, "mg/dL", 0),
    MetricSpec("Creatinine", 0.5, 0.9, 0.6, 1.2, "mg/dL", 2),
    MetricSpec("Platelets", 130000.0, 320000.0, 150000.0, 400000.0, "cells/µL", 0),
    MetricSpec("White Blood Cells", 3500.0, 8000.0, 4500.0, 11000.0, "cells/µL", 0),
    MetricSpec("Red Blood Cells", 4.0, 2.0, 4.5, 5.9, "million cells/µL", 2),
)


def classify(value: float, low: float, high: float) -> str:
    if value < low:
        return LOW
    if value > high:
        return ELEVATED
    return NORMAL


__all__ = [
    "DEFAULT_CATALOG",
    "ELEVATED",
    "LOW",
    "MetricSpec",
    "NORMAL",
    "classify",
]
