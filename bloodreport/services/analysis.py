"""Rule-based interpretation of a synthesized metric panel."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from bloodreport.services.metric_catalog import ELEVATED, LOW

FOLLOW_UP = "Schedule a follow-up with your healthcare provider to discuss these results in detail."


def _names_with_status(metrics: List[Any], status: str) -> List[str]:
    return [m.name for m in metrics if m.status == status]


def _any_named(names: List[str], *needles: str) -> bool:
    return any(needle in name for name in names for needle in needles)


def analyze_metrics(metrics: Iterable[Any]) -> Dict[str, Any]:
    """Summarize abnormal readings and suggest next steps.

    Returns {"analysis": str, "recommendations": [str, ...]}. The follow-up
    recommendation is always present and always last.
    """
    items = list(metrics or [])
    elevated = _names_with_status(items, ELEVATED)
    low = _names_with_status(items, LOW)

    analysis = "Based on your blood test results: "
    if elevated:
        analysis += f"You have elevated levels of {', '.join(elevated)}. "
    if low:
        analysis += f"You have low levels of {', '.join(low)}. "
    if not elevated and not low:
        analysis += "All your values are within normal range, which is excellent! "

    recommendations: List[str] = []
    if _any_named(elevated, "Cholesterol", "LDL"):
        recommendations.append("Consider reducing saturated fat intake and increasing exercise.")
    if _any_named(elevated, "Glucose"):
        recommendations.append("Monitor your carbohydrate intake and consider speaking with a nutritionist.")
    if _any_named(low, "Hemoglobin"):
        recommendations.append("Consider iron supplements after consulting with your doctor.")
    recommendations.append(FOLLOW_UP)

    return {"analysis": analysis.strip(), "recommendations": recommendations}


def abnormal_summary(metrics: Iterable[Any]) -> str:
    parts = [
        f"{m.name} {m.value:g} {m.unit} ({m.status})"
        for m in (metrics or [])
        if m.status in (ELEVATED, LOW)
    ]
    if not parts:
        return "All metrics in your latest report are within the normal range."
    return "Out-of-range metrics in your latest report: " + "; ".join(parts) + "."


__all__ = ["FOLLOW_UP", "abnormal_summary", "analyze_metrics"]
