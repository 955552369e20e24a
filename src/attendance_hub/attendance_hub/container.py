from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .assistant.service import AssistantService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .faces.matcher import FaceMatcher
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.service import PayslipService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import OfficeDefaults, SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Any

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    schedules_repo: ScheduleRepository
    settings_repo: SettingsRepository
    notifications_repo: NotificationRepository
    reports_repo: ReportRepository

    auth_service: AuthService
    user_service: UserService
    notification_service: NotificationService
    settings_service: SettingsService
    attendance_service: AttendanceService
    leave_service: LeaveService
    schedule_service: ScheduleService
    report_service: ReportService
    payslip_service: PayslipService
    assistant_service: AssistantService


def wire_container(
    *,
    conn: Any,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    schedules_repo: ScheduleRepository,
    settings_repo: SettingsRepository,
    notifications_repo: NotificationRepository,
    reports_repo: ReportRepository,
    reports_dir: Path | str,
    office_defaults: Optional[OfficeDefaults] = None,
    face_matcher: Optional[FaceMatcher] = None,
) -> Container:
    """Build every service on top of the given repositories."""

    notification_service = NotificationService(notifications_repo, users_repo)
    settings_service = SettingsService(settings_repo, defaults=office_defaults or OfficeDefaults())
    auth_service = AuthService(users_repo, notification_service, face_matcher=face_matcher or FaceMatcher())
    user_service = UserService(users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        settings_service,
        notification_service,
        strategy_factory=AttendanceStrategyFactory(),
    )
    leave_service = LeaveService(leave_repo, users_repo, notification_service)
    schedule_service = ScheduleService(schedules_repo)
    report_service = ReportService(attendance_repo, reports_repo, reports_dir=reports_dir)
    payslip_service = PayslipService(attendance_repo)
    assistant_service = AssistantService(
        attendance=attendance_repo,
        users=users_repo,
        schedules=schedule_service,
        leave=leave_service,
        payslips=payslip_service,
        notifications=notification_service,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        schedules_repo=schedules_repo,
        settings_repo=settings_repo,
        notifications_repo=notifications_repo,
        reports_repo=reports_repo,
        auth_service=auth_service,
        user_service=user_service,
        notification_service=notification_service,
        settings_service=settings_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        schedule_service=schedule_service,
        report_service=report_service,
        payslip_service=payslip_service,
        assistant_service=assistant_service,
    )


def build_container(
    *,
    db_config: dict,
    reports_dir: Path | str,
    office_defaults: Optional[OfficeDefaults] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        reports_dir=reports_dir,
        office_defaults=office_defaults,
    )
