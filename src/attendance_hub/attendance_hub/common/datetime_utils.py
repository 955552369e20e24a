from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from ..core.exceptions import ValidationError

HHMM_RE = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def require_iso_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


def optional_iso_date(value: Any, field_name: str) -> Optional[date]:
    if value in (None, ""):
        return None
    return require_iso_date(value, field_name)


def parse_hhmm(value: str) -> time:
    """Parse a strict 24h HH:MM string."""
    if not isinstance(value, str) or not HHMM_RE.match(value):
        raise ValidationError("Invalid time format. Use HH:MM format")
    hours, minutes = value.split(":")
    return time(hour=int(hours), minute=int(minutes))


def format_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def isoformat_or_none(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value else None


def start_of_month(now: datetime) -> datetime:
    return datetime(now.year, now.month, 1)


def days_ago(now: datetime, days: int) -> datetime:
    return now - timedelta(days=days)


def now_local() -> datetime:
    """Current local (naive) time; services take an explicit `now` in tests."""
    return datetime.now()
