"""Health assistant: LLM-backed replies with a keyword-rule fallback."""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from bloodreport.services import llm
from bloodreport.services.analysis import abnormal_summary

logger = logging.getLogger("bloodreport.assistant")

GREETING = (
    "Hi there! I'm your health assistant. I can help you understand your blood test "
    "results, suggest lifestyle improvements, or answer general health questions. "
    "What would you like to know today?"
)

SOURCE_MODEL = "model"
SOURCE_RULES = "rules"
SOURCE_FALLBACK = "fallback"

# First matching rule wins; order mirrors how specific each topic is.
_RULES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (
        ("score", "health score"),
        "Your health score is calculated based on the values from your blood tests. "
        "For more detailed information, please check the Health Overview section on your "
        "dashboard. If you've recently uploaded a new test, it may take a moment to update.",
    ),
    (
        ("next test", "when"),
        "For most people, an annual comprehensive blood test is recommended. However, this "
        "can vary based on your age, existing health conditions, and risk factors. I suggest "
        "discussing with your healthcare provider about the ideal frequency for your specific "
        "situation.",
    ),
    (
        ("improve", "better"),
        "To improve your health scores, focus on:\n\n"
        "1. Regular physical activity (at least 150 minutes/week)\n"
        "2. A balanced diet rich in fruits, vegetables, whole grains\n"
        "3. Adequate hydration (8-10 glasses of water daily)\n"
        "4. Quality sleep (7-9 hours nightly)\n"
        "5. Stress management techniques\n\n"
        "Small, consistent changes often yield the best long-term results!",
    ),
    (
        ("cholesterol", "hdl", "ldl"),
        "To maintain healthy cholesterol levels:\n\n"
        "- Increase soluble fiber (oats, beans, fruits)\n"
        "- Choose healthy fats (olive oil, avocados, nuts)\n"
        "- Limit saturated and trans fats\n"
        "- Stay physically active\n"
        "- Consider plant sterols/stanols\n\n"
        "Would you like more specific advice based on your latest test results?",
    ),
    (
        ("vitamin", "mineral"),
        "Vitamins and minerals are essential for optimal health. If your blood tests show "
        "deficiencies, consider:\n\n"
        "- Vitamin D: Regular sun exposure, fatty fish, fortified foods\n"
        "- Iron: Red meat, beans, leafy greens\n"
        "- B vitamins: Whole grains, meat, eggs, legumes\n"
        "- Magnesium: Nuts, seeds, leafy greens\n\n"
        "Always consult with your healthcare provider before starting supplements.",
    ),
    (
        ("hormone", "thyroid"),
        "Hormone levels can significantly impact your overall health. For healthy hormone "
        "balance:\n\n"
        "- Maintain a healthy weight\n"
        "- Manage stress effectively\n"
        "- Get adequate sleep\n"
        "- Exercise regularly\n"
        "- Consider diet adjustments (e.g., limiting processed foods)\n\n"
        "If your blood tests indicate hormone imbalances, I recommend following up with an "
        "endocrinologist for personalized guidance.",
    ),
)


def rule_based_reply(message: str, metrics: Optional[Sequence[Any]] = None) -> str:
    lowered = (message or "").lower()
    reply = None
    for keywords, text in _RULES:
        if any(k in lowered for k in keywords):
            reply = text
            break

    if reply is None:
        topic = message[:30] + ("..." if len(message) > 30 else "")
        if metrics:
            reply = (
                f"I understand you're asking about {topic}. I've looked at your latest blood "
                "test; ask me about a specific metric for more detail."
            )
        else:
            reply = (
                f"I understand you're asking about {topic}. To provide you with the most "
                "accurate information, I'd need to analyze your specific blood test results. "
                "Have you uploaded your latest blood test? If not, you can do so from the dashboard."
            )

    if metrics:
        reply = f"{reply}\n\n{abnormal_summary(metrics)}"
    return reply


class ChatHistoryStore:
    """Per-user rolling chat history kept in process memory."""

    def __init__(self, max_messages: int = 50):
        self.max_messages = max_messages
        self._items: Dict[str, List[Dict[str, str]]] = {}
        self._lock = threading.Lock()

    def append(self, user_id: str, role: str, content: str) -> None:
        with self._lock:
            bucket = self._items.setdefault(user_id, [])
            bucket.append({"role": role, "content": content})
            if len(bucket) > self.max_messages:
                del bucket[: len(bucket) - self.max_messages]

    def get(self, user_id: str) -> List[Dict[str, str]]:
        with self._lock:
            return list(self._items.get(user_id, []))

    def clear(self, user_id: Optional[str] = None) -> None:
        with self._lock:
            if user_id is None:
                self._items.clear()
            else:
                self._items.pop(user_id, None)


def build_system_prompt(metrics: Optional[Sequence[Any]]) -> str:
    parts = [
        "You are a concise health assistant helping a user understand their blood test.",
        "You are not a doctor; recommend professional follow-up for anything concerning.",
    ]
    if metrics:
        panel = [m.to_dict() if hasattr(m, "to_dict") else dict(m) for m in metrics]
        parts.append("LatestBloodTest=" + json.dumps(panel, ensure_ascii=False))
    else:
        parts.append("LatestBloodTest=unavailable")
    return "\n".join(parts)


async def answer(
    message: str,
    metrics: Optional[Sequence[Any]],
    history: Sequence[Dict[str, str]] = (),
    request_id: str = "",
) -> Tuple[str, str]:
    """Return (reply, source) where source is model, rules or fallback."""
    if not llm.is_configured():
        return rule_based_reply(message, metrics), SOURCE_RULES

    turns = list(history)[-10:] + [{"role": "user", "content": message}]
    try:
        reply = await llm.generate_chat(build_system_prompt(metrics), turns)
        return reply, SOURCE_MODEL
    except httpx.TimeoutException:
        logger.warning({"function": "assistant_answer", "request_id": request_id, "error": "timeout"})
    except (httpx.HTTPError, llm.LLMUnavailable, ValueError) as exc:
        logger.warning({
            "function": "assistant_answer",
            "request_id": request_id,
            "error": exc.__class__.__name__,
        })
    return rule_based_reply(message, metrics), SOURCE_FALLBACK


__all__ = [
    "ChatHistoryStore",
    "GREETING",
    "SOURCE_FALLBACK",
    "SOURCE_MODEL",
    "SOURCE_RULES",
    "answer",
    "build_system_prompt",
    "rule_based_reply",
]
