from __future__ import annotations

import re
from collections import defaultdict
from datetime import date
from typing import Sequence

import numpy as np

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus

POSITIVE_WORDS = frozenset(
    {"good", "great", "excellent", "happy", "love", "wonderful", "amazing", "perfect", "thank", "helpful", "best"}
)
NEGATIVE_WORDS = frozenset(
    {"bad", "terrible", "awful", "hate", "angry", "frustrated", "annoyed", "problem", "issue", "wrong", "error"}
)

ANOMALY_MIN_RECORDS = 5
LATE_PATTERN_MIN_RECORDS = 3
LATE_PATTERN_MIN_PER_DAY = 2
PREDICTION_MIN_RECORDS = 7
PREDICTION_MIN_SAMPLES = 2
TREND_WINDOW = 14
RECENT_WINDOW = 5

_WORD_RE = re.compile(r"[a-z']+")


def _day_name(weekday: int) -> str:
    return ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")[weekday]


def _hours(record: AttendanceRecord) -> float:
    return float(record.hours_worked or 0)


def analyze_sentiment(text: str) -> dict:
    words = _WORD_RE.findall((text or "").lower())
    positive = sum(1 for w in words if w in POSITIVE_WORDS)
    negative = sum(1 for w in words if w in NEGATIVE_WORDS)
    total = positive + negative
    if total == 0 or positive == negative:
        return {"sentiment": "neutral", "confidence": 0.5}
    if positive > negative:
        return {"sentiment": "positive", "confidence": positive / total}
    return {"sentiment": "negative", "confidence": negative / total}


def detect_anomalies(records: Sequence[AttendanceRecord]) -> dict:
    """Clock-in outliers (beyond two standard deviations) and weekday lateness patterns."""

    if len(records) < ANOMALY_MIN_RECORDS:
        return {"hasAnomalies": False, "anomalies": []}

    anomalies: list[dict] = []
    minutes = np.array([r.clock_in.hour * 60 + r.clock_in.minute for r in records], dtype=float)
    mean = minutes.mean()
    std = minutes.std()
    for record, value in zip(records, minutes):
        if abs(value - mean) > 2 * std:
            anomalies.append(
                {
                    "type": "unusual_clock_in",
                    "date": record.clock_in.isoformat(),
                    "userId": record.user_id,
                    "message": f"Unusual clock-in time detected on {record.work_date.isoformat()}",
                }
            )

    late = [r for r in records if r.status == AttendanceStatus.LATE]
    if len(late) >= LATE_PATTERN_MIN_RECORDS:
        per_day: dict[int, int] = defaultdict(int)
        for r in late:
            per_day[r.clock_in.weekday()] += 1
        for weekday in sorted(per_day):
            if per_day[weekday] >= LATE_PATTERN_MIN_PER_DAY:
                name = _day_name(weekday)
                anomalies.append(
                    {
                        "type": "pattern_lateness",
                        "day": name,
                        "count": per_day[weekday],
                        "message": f"Pattern detected: Frequent lateness on {name}s",
                    }
                )

    return {"hasAnomalies": bool(anomalies), "anomalies": anomalies}


def productivity_insights(records: Sequence[AttendanceRecord]) -> list[str]:
    if not records:
        return ["No attendance data available for analysis."]

    insights: list[str] = []
    hours = np.array([_hours(r) for r in records], dtype=float)
    avg_hours = float(hours.mean())
    if avg_hours >= 8:
        insights.append(f"Excellent work ethic! You're averaging {avg_hours:.1f} hours per day.")
    elif avg_hours >= 6:
        insights.append(
            f"Good performance with {avg_hours:.1f} hours average. Consider staying a bit longer for optimal productivity."
        )
    else:
        insights.append(f"Your average work time is {avg_hours:.1f} hours. Consider ways to increase your daily hours.")

    late_count = sum(1 for r in records if r.status == AttendanceStatus.LATE)
    punctuality = (len(records) - late_count) / len(records) * 100
    if punctuality >= 95:
        insights.append(f"Outstanding punctuality at {punctuality:.1f}%! You're a model of reliability.")
    elif punctuality >= 85:
        insights.append(f"Good punctuality rate of {punctuality:.1f}%. Minor improvements possible.")
    else:
        insights.append(f"Punctuality rate is {punctuality:.1f}%. Consider adjusting your morning routine for improvement.")

    overtime = sum(1 for r in records if r.status == AttendanceStatus.OVERTIME)
    if overtime:
        insights.append(f"You've worked overtime {overtime} times this period. Ensure work-life balance.")

    by_day: dict[int, list[float]] = defaultdict(list)
    for r in records:
        by_day[r.clock_in.weekday()].append(_hours(r))
    best_day, best_avg = None, 0.0
    for weekday in sorted(by_day):
        avg = float(np.mean(by_day[weekday]))
        if avg > best_avg:
            best_day, best_avg = weekday, avg
    if best_day is not None:
        insights.append(f"Your most productive day is {_day_name(best_day)} with an average of {best_avg:.1f} hours.")

    return insights


def predict_attendance(records: Sequence[AttendanceRecord], *, today: date) -> list[dict]:
    """Per-weekday lateness odds for the next five days plus an overall trend.

    `records` are expected newest first.
    """

    if len(records) < PREDICTION_MIN_RECORDS:
        return [
            {
                "type": "general",
                "prediction": "Insufficient data for accurate predictions",
                "confidence": 30,
                "recommendation": "Continue tracking attendance for more accurate predictions.",
            }
        ]

    patterns: dict[int, dict] = defaultdict(lambda: {"total": 0, "late": 0, "hours": []})
    for r in records:
        p = patterns[r.clock_in.weekday()]
        p["total"] += 1
        if r.status == AttendanceStatus.LATE:
            p["late"] += 1
        p["hours"].append(_hours(r))

    predictions: list[dict] = []
    for offset in range(1, 6):
        weekday = (today.weekday() + offset) % 7
        p = patterns.get(weekday)
        if not p or p["total"] < PREDICTION_MIN_SAMPLES:
            continue
        late_prob = round(p["late"] / p["total"] * 100)
        name = _day_name(weekday)
        predictions.append(
            {
                "type": "daily",
                "day": name,
                "prediction": f"{late_prob}% likelihood of being late",
                "lateProbability": late_prob,
                "expectedHours": round(float(np.mean(p["hours"])), 1),
                "confidence": min(90, 50 + p["total"] * 5),
                "recommendation": (
                    f"Consider leaving earlier on {name}s" if late_prob > 30 else f"Maintain your good habits on {name}s"
                ),
            }
        )

    recent = records[:TREND_WINDOW]
    late_rate = sum(1 for r in recent if r.status == AttendanceStatus.LATE) / len(recent) * 100
    if late_rate < 10:
        trend = "Your attendance trend is excellent"
    elif late_rate < 25:
        trend = "Your attendance trend is good but could improve"
    else:
        trend = "Your attendance trend shows room for improvement"
    predictions.append(
        {
            "type": "trend",
            "prediction": trend,
            "confidence": 75,
            "recommendation": (
                "Try adjusting your morning routine to reduce late arrivals" if late_rate >= 25 else "Keep up the great work!"
            ),
        }
    )
    return predictions


def smart_notifications(records: Sequence[AttendanceRecord]) -> list[dict]:
    """Nudges derived from the most recent five records (newest first)."""

    recent = records[:RECENT_WINDOW]
    late = sum(1 for r in recent if r.status == AttendanceStatus.LATE)
    notifications: list[dict] = []

    if late >= 3:
        notifications.append(
            {
                "type": "warning",
                "title": "Attendance Alert",
                "message": f"You've been late {late} times recently. This may affect your performance review.",
                "priority": "high",
                "actionable": True,
                "action": "View Attendance Tips",
            }
        )

    weekly_hours = sum(_hours(r) for r in recent)
    if weekly_hours > 45:
        notifications.append(
            {
                "type": "info",
                "title": "Overtime Alert",
                "message": f"You've worked {weekly_hours:.1f} hours this week. Remember to maintain work-life balance.",
                "priority": "medium",
            }
        )

    if len(recent) >= RECENT_WINDOW and late == 0:
        notifications.append(
            {
                "type": "success",
                "title": "Perfect Week!",
                "message": "Congratulations! You maintained perfect punctuality this week.",
                "priority": "low",
            }
        )
    return notifications
