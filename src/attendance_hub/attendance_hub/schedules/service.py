from __future__ import annotations

from collections import OrderedDict
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import as_bool, optional_text
from ..core.constants import DEFAULT_SCHEDULE_LOCATION, SCHEDULE_APPLIES_TO_ALL
from ..core.enums import DayOfWeek, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..logging_config import get_logger
from .model import NewScheduleEntry, ScheduleEntry
from .repository import ScheduleRepository

logger = get_logger(__name__)

_AUDIENCES = {SCHEDULE_APPLIES_TO_ALL} | {r.value for r in Role}


def _parse_day(value: Any) -> DayOfWeek:
    try:
        return DayOfWeek(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Invalid day of week")


def _parse_audience(value: Any) -> str:
    audience = str(value or SCHEDULE_APPLIES_TO_ALL).strip().lower()
    if audience not in _AUDIENCES:
        raise ValidationError(f"appliesTo must be one of: {', '.join(sorted(_AUDIENCES))}")
    return audience


def parse_entry(data: Mapping[str, Any]) -> NewScheduleEntry:
    """Validate one request payload (camelCase keys) into a draft entry."""

    day = data.get("dayOfWeek")
    start = data.get("startTime")
    end = data.get("endTime")
    if not day or not start or not end:
        raise ValidationError("Day of week, start time, and end time are required")

    start_time = parse_hhmm(start)
    end_time = parse_hhmm(end)
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")

    return NewScheduleEntry(
        day_of_week=_parse_day(day),
        start_time=start_time,
        end_time=end_time,
        subject=optional_text(data.get("subject"), "subject"),
        description=optional_text(data.get("description"), "description"),
        location=optional_text(data.get("location"), "location", DEFAULT_SCHEDULE_LOCATION),
        applies_to=_parse_audience(data.get("appliesTo")),
        is_active=as_bool(data.get("isActive", True)),
    )


def group_by_day(entries: Sequence[ScheduleEntry]) -> "OrderedDict[str, list[dict]]":
    grouped: "OrderedDict[str, list[dict]]" = OrderedDict((d.value, []) for d in DayOfWeek)
    for entry in entries:
        grouped[entry.day_of_week.value].append(entry.to_dict())
    return grouped


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def get_for_role(self, role: Role) -> tuple[Sequence[ScheduleEntry], "OrderedDict[str, list[dict]]"]:
        entries = self._schedules.list_entries(
            active_only=True,
            audiences=[SCHEDULE_APPLIES_TO_ALL, role.value],
        )
        return entries, group_by_day(entries)

    def list_for_day(self, day: DayOfWeek, *, role: Optional[Role] = None) -> Sequence[ScheduleEntry]:
        audiences = [SCHEDULE_APPLIES_TO_ALL, role.value] if role else None
        return self._schedules.list_entries(active_only=True, audiences=audiences, day=day)

    def list_all(self, *, current_role: Role) -> Sequence[ScheduleEntry]:
        self._require_admin(current_role)
        return self._schedules.list_entries()

    def create(self, *, current_user_id: int, current_role: Role, data: Mapping[str, Any]) -> ScheduleEntry:
        self._require_admin(current_role)
        draft = parse_entry(data)
        entry_id = self._schedules.create(draft, created_by=int(current_user_id))
        logger.info("Schedule entry %s created by admin %s", entry_id, current_user_id)
        return self._load(entry_id)

    def update(self, *, current_role: Role, entry_id: int, data: Mapping[str, Any]) -> ScheduleEntry:
        self._require_admin(current_role)
        current = self._load(entry_id)

        fields: dict[str, Any] = {}
        if "dayOfWeek" in data:
            fields["day_of_week"] = _parse_day(data["dayOfWeek"])
        if "startTime" in data:
            fields["start_time"] = parse_hhmm(data["startTime"])
        if "endTime" in data:
            fields["end_time"] = parse_hhmm(data["endTime"])
        for key in ("subject", "description"):
            if key in data:
                fields[key] = optional_text(data[key], key)
        if "location" in data:
            fields["location"] = optional_text(data["location"], "location", DEFAULT_SCHEDULE_LOCATION)
        if "appliesTo" in data:
            fields["applies_to"] = _parse_audience(data["appliesTo"])
        if "isActive" in data:
            fields["is_active"] = as_bool(data["isActive"])

        if not fields:
            raise ValidationError("No fields to update")

        start = fields.get("start_time", current.start_time)
        end = fields.get("end_time", current.end_time)
        if end <= start:
            raise ValidationError("End time must be after start time")

        self._schedules.update_fields(entry_id, fields)
        return self._load(entry_id)

    def delete(self, *, current_role: Role, entry_id: int) -> None:
        self._require_admin(current_role)
        if not self._schedules.delete(int(entry_id)):
            raise NotFoundError("Schedule entry not found")
        logger.info("Schedule entry %s deleted", entry_id)

    def replace_all(
        self, *, current_user_id: int, current_role: Role, entries: Any
    ) -> Sequence[ScheduleEntry]:
        self._require_admin(current_role)
        if not isinstance(entries, list):
            raise ValidationError("schedules must be a list")

        drafts = []
        for index, item in enumerate(entries):
            if not isinstance(item, Mapping):
                raise ValidationError(f"Schedule entry {index + 1} must be an object")
            try:
                drafts.append(parse_entry(item))
            except ValidationError as exc:
                raise ValidationError(f"Schedule entry {index + 1}: {exc}")

        self._schedules.replace_all(drafts, created_by=int(current_user_id))
        logger.info("Weekly schedule replaced with %s entries by admin %s", len(drafts), current_user_id)
        return self._schedules.list_entries()

    def _load(self, entry_id: int) -> ScheduleEntry:
        entry = self._schedules.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Schedule entry not found")
        return entry

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
