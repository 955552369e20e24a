"""Rule-based intent classification for the chat assistant.

Each intent owns a table of weighted regular expressions and a list of plain
keywords. A message scores, per intent, the sum of the weights of the patterns
it matches plus 0.1 for every keyword it contains, divided by the number of
hits and capped at 1.0. The highest scoring intent wins; a message that hits
nothing is classified as ``general``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

GENERAL_INTENT = "general"
KEYWORD_WEIGHT = 0.1


@dataclass(frozen=True)
class IntentRule:
    name: str
    patterns: Sequence[tuple[re.Pattern, float]]
    keywords: Sequence[str] = ()

    def score(self, message: str) -> float:
        lower = message.lower()
        total = 0.0
        hits = 0
        for pattern, weight in self.patterns:
            if pattern.search(lower):
                total += weight
                hits += 1
        for keyword in self.keywords:
            if keyword in lower:
                total += KEYWORD_WEIGHT
                hits += 1
        if not hits:
            return 0.0
        return min(1.0, total / hits)


@dataclass(frozen=True)
class IntentResult:
    intent: str
    confidence: float
    entities: dict = field(default_factory=dict)
    scores: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "intent": self.intent,
            "confidence": round(self.confidence, 3),
            "entities": self.entities,
        }


def _rx(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


DEFAULT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        "attendance_check",
        [
            (_rx(r"\b(my|check|show|view)\s+(attendance|hours|record)"), 0.9),
            (_rx(r"\bhow\s+many\s+hours\b"), 0.85),
            (_rx(r"\b(attendance|present|absent|clock(ed)?\s*(in|out)?)\b"), 0.6),
        ],
        ["attendance", "hours worked", "clock in", "clock out"],
    ),
    IntentRule(
        "leave_request",
        [
            (_rx(r"\b(apply|request|need|want|take)\b.*\b(leave|vacation|time\s*off|day\s*off)\b"), 0.95),
            (_rx(r"\b(leave|vacation|holiday|time\s*off)\b"), 0.6),
        ],
        ["leave", "vacation", "holiday", "sick leave", "annual leave"],
    ),
    IntentRule(
        "payslip",
        [
            (_rx(r"\b(payslip|pay\s*stub|salary|wage|earnings)\b"), 0.9),
            (_rx(r"\b(pay|income|money)\b"), 0.6),
        ],
        ["payslip", "salary", "earn"],
    ),
    IntentRule(
        "lateness_report",
        [
            (_rx(r"\b(running|going\s+to\s+be|will\s+be)\s+late\b"), 0.95),
            (_rx(r"\b(late|delay(ed)?|traffic|behind\s+schedule)\b"), 0.55),
        ],
        ["late", "traffic", "delay"],
    ),
    IntentRule(
        "analytics",
        [
            (_rx(r"\b(analytics|statistics|stats|insights?|dashboard|overview)\b"), 0.85),
            (_rx(r"\b(trend|pattern|predict(ion)?|forecast)\b"), 0.7),
        ],
        ["analytics", "stats", "trend"],
    ),
    IntentRule(
        "report_generate",
        [
            (_rx(r"\b(generate|create|make|export|download)\b.*\b(report|pdf|csv|excel)\b"), 0.95),
            (_rx(r"\b(report|pdf|csv|export)\b"), 0.6),
        ],
        ["report", "export"],
    ),
    IntentRule(
        "notifications",
        [
            (_rx(r"\b(notifications?|alerts?|unread)\b"), 0.85),
        ],
        ["notification", "alert"],
    ),
    IntentRule(
        "user_management",
        [
            (_rx(r"\b(add|create|manage|delete|remove|list)\b.*\b(users?|employees?|students?)\b"), 0.9),
            (_rx(r"\b(users?|employees?|students?)\b"), 0.5),
        ],
        ["user", "employee", "student"],
    ),
    IntentRule(
        "greeting",
        [
            (_rx(r"^\s*(hi|hello|hey|howdy|greetings)\b"), 0.95),
            (_rx(r"\bgood\s+(morning|afternoon|evening)\b"), 0.9),
        ],
        [],
    ),
    IntentRule(
        "help",
        [
            (_rx(r"\b(help|assist)\b"), 0.85),
            (_rx(r"\bwhat\s+can\s+you\b|\bhow\s+do\s+i\b"), 0.8),
        ],
        ["help"],
    ),
)

_PERIODS = {
    "today": "today",
    "yesterday": "yesterday",
    "this week": "week",
    "last week": "last_week",
    "week": "week",
    "this month": "month",
    "last month": "last_month",
    "month": "month",
    "quarter": "quarter",
    "year": "year",
}

_NUMERIC_DATE = _rx(r"\b(\d{4}-\d{1,2}-\d{1,2}|\d{1,2}[/-]\d{1,2}[/-]\d{2,4})\b")
_RELATIVE_DAY = _rx(r"\b(today|tomorrow|yesterday)\b")


def extract_leave_type(message: str) -> Optional[str]:
    lower = message.lower()
    if "annual" in lower or "vacation" in lower:
        return "annual"
    if "sick" in lower or "medical" in lower or re.search(r"\bill\b", lower):
        return "sick"
    if "personal" in lower or "family" in lower:
        return "personal"
    if "maternity" in lower:
        return "maternity"
    if "paternity" in lower:
        return "paternity"
    if "unpaid" in lower:
        return "unpaid"
    return None


def extract_entities(message: str) -> dict:
    entities: dict = {}
    lower = message.lower()

    m = _NUMERIC_DATE.search(message) or _RELATIVE_DAY.search(lower)
    if m:
        entities["date"] = m.group(1)

    # longest phrase first so "last week" beats "week"
    for phrase in sorted(_PERIODS, key=len, reverse=True):
        if re.search(rf"\b{phrase}\b", lower):
            entities["period"] = _PERIODS[phrase]
            break

    leave_type = extract_leave_type(message)
    if leave_type:
        entities["leave_type"] = leave_type
    return entities


class IntentClassifier:
    def __init__(self, rules: Sequence[IntentRule] = DEFAULT_RULES):
        self._rules = tuple(rules)

    def classify(self, message: str) -> IntentResult:
        text = (message or "").strip()
        scores = {rule.name: rule.score(text) for rule in self._rules}

        best_name, best_score = GENERAL_INTENT, 0.0
        for name, score in scores.items():
            if score > best_score:
                best_name, best_score = name, score

        return IntentResult(
            intent=best_name,
            confidence=best_score,
            entities=extract_entities(text),
            scores=scores,
        )
