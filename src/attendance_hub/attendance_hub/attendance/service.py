from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.geo import GeoPoint, check_geofence
from ..common.validators import require_float
from ..core.constants import HISTORY_LIMIT
from ..core.enums import AttendanceStatus, NotificationType, Role
from ..core.exceptions import LocationError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..notifications.service import NotificationService
from ..settings.service import SettingsService
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttendanceStats:
    present_days: int
    late_days: int
    absent_days: int
    overtime_days: int
    total_hours: float
    avg_hours_per_day: float

    def to_dict(self) -> dict:
        return {
            "present_days": self.present_days,
            "late_days": self.late_days,
            "absent_days": self.absent_days,
            "overtime_days": self.overtime_days,
            "total_hours": self.total_hours,
            "avg_hours_per_day": self.avg_hours_per_day,
        }


def parse_location(latitude: Any, longitude: Any) -> GeoPoint:
    if latitude in (None, "") or longitude in (None, ""):
        raise ValidationError("Location is required. Please enable location services.")
    lat = require_float(latitude, "latitude")
    lon = require_float(longitude, "longitude")
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise ValidationError("Location coordinates are out of range")
    return GeoPoint(lat, lon)


def compute_stats(records: Sequence[AttendanceRecord]) -> AttendanceStats:
    counts = {status: 0 for status in AttendanceStatus}
    hours = []
    for r in records:
        counts[r.status] += 1
        if r.hours_worked is not None:
            hours.append(float(r.hours_worked))
    total = round(sum(hours), 2)
    avg = round(total / len(hours), 2) if hours else 0.0
    return AttendanceStats(
        present_days=counts[AttendanceStatus.PRESENT],
        late_days=counts[AttendanceStatus.LATE],
        absent_days=counts[AttendanceStatus.ABSENT],
        overtime_days=counts[AttendanceStatus.OVERTIME],
        total_hours=total,
        avg_hours_per_day=avg,
    )


class AttendanceService:
    """Geofenced clock in/out plus history and statistics."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        settings: SettingsService,
        notifications: Optional[NotificationService] = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._settings = settings
        self._notifications = notifications
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def clock_in(self, user_id: int, *, latitude: Any, longitude: Any, now: datetime | None = None) -> AttendanceRecord:
        point = parse_location(latitude, longitude)
        now = now or now_local()
        rules = self._settings.attendance_rules()

        self._verify_location(point, rules.office, rules.radius_meters, action="clock in")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if self._attendance.get_open_for_user_on(user_id, now.date()):
            raise ValidationError("You have already clocked in today")

        strategy = self._factory.for_clock_in(now=now, rules=rules)
        decision = strategy.decide_clock_in(now=now, rules=rules)

        attendance_id = self._attendance.create_clock_in(
            user_id=user_id,
            clock_in=now,
            status=decision.status,
            location_verified=True,
            location=point.to_dict(),
            notes=decision.note,
        )
        logger.info("User %s clocked in at %s (%s)", user_id, now.isoformat(), decision.status.value)

        if self._notifications:
            time_str = now.strftime("%H:%M")
            if decision.status == AttendanceStatus.LATE:
                self._notifications.notify_admin(
                    "Late Arrival",
                    f"{user.name} clocked in late at {time_str}.",
                    NotificationType.WARNING,
                )
                self._notifications.notify_user(
                    user_id,
                    "Late Clock In",
                    f"You clocked in at {time_str}, after the start time of {rules.work_start.strftime('%H:%M')}.",
                    NotificationType.WARNING,
                )
            else:
                self._notifications.notify_admin("Clock In", f"{user.name} clocked in at {time_str}.", NotificationType.INFO)
                self._notifications.notify_user(
                    user_id, "Clock In Successful", f"You clocked in at {time_str}.", NotificationType.SUCCESS
                )

        return self._load(attendance_id)

    def clock_out(self, user_id: int, *, latitude: Any, longitude: Any, now: datetime | None = None) -> AttendanceRecord:
        point = parse_location(latitude, longitude)
        now = now or now_local()
        rules = self._settings.attendance_rules()

        self._verify_location(point, rules.office, rules.radius_meters, action="clock out")

        record = self._attendance.get_open_for_user_on(user_id, now.date())
        if not record:
            latest = self._attendance.get_latest_for_user_on(user_id, now.date())
            if latest and latest.clock_out is not None:
                raise ValidationError("You have already clocked out today")
            raise ValidationError("No active clock in found for today. Please clock in first.")

        hours_worked = round(max((now - record.clock_in).total_seconds(), 0) / 3600, 2)
        strategy = self._factory.for_clock_out(hours_worked=hours_worked, rules=rules)
        decision = strategy.decide_clock_out(now=now, hours_worked=hours_worked, rules=rules, current=record.status)

        self._attendance.update_clock_out(
            attendance_id=record.attendance_id,
            clock_out=now,
            hours_worked=hours_worked,
            status=decision.status,
            location=point.to_dict(),
            notes=decision.note or record.notes,
        )
        logger.info("User %s clocked out after %.2fh (%s)", user_id, hours_worked, decision.status.value)

        if self._notifications:
            user = self._users.get_by_id(user_id)
            name = user.name if user else f"User {user_id}"
            self._notifications.notify_admin(
                "Clock Out", f"{name} clocked out after {hours_worked} hours.", NotificationType.INFO
            )
            self._notifications.notify_user(
                user_id,
                "Clock Out Successful",
                f"You clocked out at {now.strftime('%H:%M')}. Hours worked: {hours_worked}.",
                NotificationType.SUCCESS,
            )

        return self._load(record.attendance_id)

    def get_history(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        if current_role == Role.ADMIN:
            target = user_id
        else:
            target = current_user_id
        return self._attendance.list_history(
            user_id=target,
            start_date=start_date,
            end_date=end_date,
            status=status,
            limit=HISTORY_LIMIT,
        )

    def get_today(self, user_id: int, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        now = now or now_local()
        return self._attendance.get_latest_for_user_on(user_id, now.date())

    def get_stats(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AttendanceStats:
        target = user_id if (current_role == Role.ADMIN and user_id) else current_user_id
        records = self._attendance.list_for_user(target, start_date=start_date, end_date=end_date)
        return compute_stats(records)

    def _verify_location(self, point: GeoPoint, office: GeoPoint, radius: float, *, action: str) -> None:
        result = check_geofence(point, office, radius)
        if not result.within:
            logger.info("Rejected %s %.0fm from office (limit %.0fm)", action, result.distance, radius)
            raise LocationError(
                f"You are {round(result.distance)}m away from the office. "
                f"Please be within {radius / 1000:g}km to {action}.",
                distance=result.distance,
                threshold=radius,
            )

    def _load(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record
