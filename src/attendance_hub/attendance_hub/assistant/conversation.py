from __future__ import annotations

import re
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.constants import CHAT_HISTORY_LIMIT

PATTERNS: dict[str, re.Pattern] = {
    "greeting": re.compile(r"^(hi|hello|hey|good\s*(morning|afternoon|evening)|howdy|what's up|sup)\b", re.I),
    "how_are_you": re.compile(r"how\s*(are\s*you|('s\s*it\s*going)|do\s*you\s*do)", re.I),
    "thanks": re.compile(r"(thank|thanks|thx|appreciate)", re.I),
    "goodbye": re.compile(r"(bye|goodbye|see\s*you|later|have\s*a\s*good)", re.I),
    "confirm": re.compile(r"^(yes|yeah|yep|sure|ok|okay|confirm|proceed|go ahead|do it)\b", re.I),
    "cancel": re.compile(r"^(no|nope|cancel|nevermind|never\s*mind|stop)\b", re.I),
    "help": re.compile(r"(help|what\s*can\s*you|how\s*do\s*i|assist)", re.I),
    "apply_leave": re.compile(r"(apply|request|want|need|take)\s*(for)?\s*(leave|vacation|time\s*off|day\s*off)", re.I),
    "check_attendance": re.compile(r"(check|show|view|my|see)\s*(my)?\s*(attendance|hours|record|clock|time)", re.I),
    "check_schedule": re.compile(r"(schedule|timetable|what('s|s)?\s*(on|happening)|class(es)?|meeting)", re.I),
    "generate_report": re.compile(r"(generate|create|make|get)\s*(a|my)?\s*(report|pdf|csv|export)", re.I),
    "payslip": re.compile(r"(pay|salary|wage|payslip|earning|income)", re.I),
    "late_report": re.compile(r"(running\s*late|going\s*to\s*be\s*late|late\s*today|delay)", re.I),
    "what_time": re.compile(r"what\s*time", re.I),
    "what_day": re.compile(r"what\s*(day|date)", re.I),
    "who_am_i": re.compile(r"who\s*am\s*i", re.I),
}

# Checked in this order; the first match wins.
PATTERN_ORDER = (
    "greeting",
    "how_are_you",
    "thanks",
    "goodbye",
    "help",
    "apply_leave",
    "check_attendance",
    "check_schedule",
    "generate_report",
    "payslip",
    "late_report",
    "what_time",
    "what_day",
    "who_am_i",
)

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_ISO_DATE = re.compile(r"\b(\d{4})[/-](\d{1,2})[/-](\d{1,2})\b")
_DMY_DATE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b")
_NATURAL_DATE = re.compile(
    r"\b(january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sep|oct|nov|dec)\s+(\d{1,2})\b",
    re.I,
)


def match(name: str, message: str) -> bool:
    return bool(PATTERNS[name].search(message))


def first_pattern(message: str) -> Optional[str]:
    for name in PATTERN_ORDER:
        if match(name, message):
            return name
    return None


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    if year < 100:
        year += 2000
    try:
        return date(year, month, day)
    except ValueError:
        return None


def extract_dates(message: str, *, today: date) -> tuple[Optional[str], Optional[str]]:
    """Return the first two dates of `message` as ISO strings.

    Numeric dates (``dd/mm/yyyy``, ``dd-mm-yyyy``, ``yyyy-mm-dd``) are tried
    first, then ``Month D`` pairs in the current year.
    """

    found: list[tuple[int, date]] = []
    iso_spans = []
    for m in _ISO_DATE.finditer(message):
        iso_spans.append(m.span())
        d = _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        if d:
            found.append((m.start(), d))
    for m in _DMY_DATE.finditer(message):
        if any(start <= m.start() < end for start, end in iso_spans):
            continue
        d = _safe_date(int(m.group(3)), int(m.group(2)), int(m.group(1)))
        if d:
            found.append((m.start(), d))

    if len(found) >= 2:
        found.sort(key=lambda item: item[0])
        return found[0][1].isoformat(), found[1][1].isoformat()

    natural = []
    for m in _NATURAL_DATE.finditer(message):
        d = _safe_date(today.year, MONTHS[m.group(1).lower()], int(m.group(2)))
        if d:
            natural.append(d)
    if len(natural) >= 2:
        return natural[0].isoformat(), natural[1].isoformat()

    return None, None


@dataclass
class ConversationContext:
    messages: deque = field(default_factory=lambda: deque(maxlen=CHAT_HISTORY_LIMIT))
    pending_action: Optional[str] = None
    pending_data: dict = field(default_factory=dict)
    last_intent: Optional[str] = None
    user_name: Optional[str] = None

    def clear_pending(self) -> None:
        self.pending_action = None
        self.pending_data = {}


class ConversationStore:
    """In-process per-user chat state. History keeps the newest 20 messages."""

    def __init__(self):
        self._contexts: dict[int, ConversationContext] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> ConversationContext:
        with self._lock:
            ctx = self._contexts.get(int(user_id))
            if ctx is None:
                ctx = ConversationContext()
                self._contexts[int(user_id)] = ctx
            return ctx

    def add_message(self, user_id: int, role: str, content: str, *, now: datetime) -> None:
        ctx = self.get(user_id)
        with self._lock:
            ctx.messages.append({"role": role, "content": content, "timestamp": now.isoformat()})

    def history(self, user_id: int) -> list[dict]:
        ctx = self.get(user_id)
        with self._lock:
            return list(ctx.messages)

    def reset(self, user_id: int) -> None:
        with self._lock:
            self._contexts.pop(int(user_id), None)


def action(label: str, name: str) -> dict:
    return {"label": label, "action": name}


@dataclass
class ChatReply:
    message: str
    actions: list = field(default_factory=list)
    requires_confirmation: bool = False
    requires_input: bool = False
    data: Any = None
    intent: Optional[str] = None
    success: Optional[bool] = None
    error: bool = False

    def to_dict(self) -> dict:
        out = {
            "message": self.message,
            "actions": self.actions,
            "requiresConfirmation": self.requires_confirmation,
            "requiresInput": self.requires_input,
            "data": self.data,
        }
        if self.intent:
            out["intent"] = self.intent
        if self.success is not None:
            out["actionSuccess"] = self.success
        if self.error:
            out["error"] = True
        return out
