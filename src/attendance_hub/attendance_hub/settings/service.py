from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import time
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..common.geo import GeoPoint
from ..core import constants
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..logging_config import get_logger
from .repository import SettingsRepository

logger = get_logger(__name__)

_KEY_RE = re.compile(r"^[a-z][a-z0-9_]{0,99}$")


@dataclass(frozen=True)
class AttendanceRules:
    """Effective clock-in/out rules (settings table over config defaults)."""

    office: GeoPoint
    radius_meters: float
    work_start: time
    late_threshold_minutes: int
    overtime_threshold_hours: float


@dataclass(frozen=True)
class OfficeDefaults:
    latitude: float = constants.DEFAULT_OFFICE_LATITUDE
    longitude: float = constants.DEFAULT_OFFICE_LONGITUDE
    radius_meters: float = constants.DEFAULT_LOCATION_RADIUS_METERS
    work_start_time: str = constants.DEFAULT_WORK_START_TIME
    late_threshold_minutes: int = constants.DEFAULT_LATE_THRESHOLD_MINUTES
    overtime_threshold_hours: float = constants.DEFAULT_OVERTIME_THRESHOLD_HOURS

    @classmethod
    def from_settings(cls, settings: Any) -> "OfficeDefaults":
        return cls(
            latitude=float(getattr(settings, "OFFICE_LATITUDE", cls.latitude)),
            longitude=float(getattr(settings, "OFFICE_LONGITUDE", cls.longitude)),
            radius_meters=float(getattr(settings, "LOCATION_RADIUS_METERS", cls.radius_meters)),
            work_start_time=str(getattr(settings, "WORK_START_TIME", cls.work_start_time)),
            late_threshold_minutes=int(getattr(settings, "LATE_THRESHOLD_MINUTES", cls.late_threshold_minutes)),
            overtime_threshold_hours=float(getattr(settings, "OVERTIME_THRESHOLD_HOURS", cls.overtime_threshold_hours)),
        )


def _finite(value: str) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise ValueError
    return v


def _latitude(value: str) -> float:
    v = _finite(value)
    if not -90 <= v <= 90:
        raise ValueError
    return v


def _longitude(value: str) -> float:
    v = _finite(value)
    if not -180 <= v <= 180:
        raise ValueError
    return v


def _positive_float(value: str) -> float:
    v = _finite(value)
    if v <= 0:
        raise ValueError
    return v


def _non_negative_int(value: str) -> int:
    v = int(value)
    if v < 0:
        raise ValueError
    return v


# Known keys are validated before they are stored; unknown keys are free-form text.
_TYPED_KEYS: dict[str, Callable[[str], Any]] = {
    "office_latitude": _latitude,
    "office_longitude": _longitude,
    "location_radius_meters": _positive_float,
    "work_start_time": parse_hhmm,
    "late_threshold_minutes": _non_negative_int,
    "overtime_threshold_hours": _positive_float,
}


class SettingsService:
    def __init__(self, settings: SettingsRepository, *, defaults: Optional[OfficeDefaults] = None):
        self._settings = settings
        self._defaults = defaults or OfficeDefaults()

    def get_all(self, *, current_role: Role) -> dict[str, Optional[str]]:
        self._require_admin(current_role)
        return self._settings.get_all()

    def update_one(self, *, current_role: Role, key: Any, value: Any) -> dict[str, Optional[str]]:
        self._require_admin(current_role)
        self._settings.upsert_many(self._clean({key: value}))
        return self._settings.get_all()

    def update_many(self, *, current_role: Role, values: Any) -> dict[str, Optional[str]]:
        self._require_admin(current_role)
        if not isinstance(values, Mapping) or not values:
            raise ValidationError("Settings object is required")
        self._settings.upsert_many(self._clean(values))
        return self._settings.get_all()

    def attendance_rules(self) -> AttendanceRules:
        stored = self._settings.get_all()
        d = self._defaults

        def read(key: str, fallback: Any) -> Any:
            raw = stored.get(key)
            if raw in (None, ""):
                return _TYPED_KEYS[key](str(fallback))
            try:
                return _TYPED_KEYS[key](str(raw))
            except (ValueError, ValidationError):
                logger.warning("Ignoring invalid setting %s=%r, using %r", key, raw, fallback)
                return _TYPED_KEYS[key](str(fallback))

        return AttendanceRules(
            office=GeoPoint(read("office_latitude", d.latitude), read("office_longitude", d.longitude)),
            radius_meters=read("location_radius_meters", d.radius_meters),
            work_start=read("work_start_time", d.work_start_time),
            late_threshold_minutes=read("late_threshold_minutes", d.late_threshold_minutes),
            overtime_threshold_hours=read("overtime_threshold_hours", d.overtime_threshold_hours),
        )

    def _clean(self, values: Mapping[Any, Any]) -> dict[str, Optional[str]]:
        out: dict[str, Optional[str]] = {}
        for key, value in values.items():
            key = str(key or "").strip()
            if not _KEY_RE.match(key):
                raise ValidationError(f"Invalid setting key: {key!r}")
            text = None if value is None else str(value).strip()
            parser = _TYPED_KEYS.get(key)
            if parser is not None:
                try:
                    parser(text or "")
                except (ValueError, ValidationError):
                    raise ValidationError(f"Invalid value for {key}: {value!r}")
            out[key] = text
        return out

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
