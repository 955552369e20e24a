from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import days_ago, format_hhmm, now_local, start_of_month
from ..core.constants import ANALYTICS_WINDOW_DAYS
from ..core.enums import AttendanceStatus, DayOfWeek, NotificationType, Role
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..leave.service import LeaveService
from ..logging_config import get_logger
from ..notifications.service import NotificationService
from ..payroll.service import PayslipService
from ..schedules.service import ScheduleService
from ..users.repository import UserRepository
from . import analytics
from .conversation import ChatReply, ConversationContext, ConversationStore, action, extract_dates, first_pattern, match
from .intents import IntentClassifier, extract_leave_type

logger = get_logger(__name__)

INSIGHT_PERIODS = {"week": 7, "month": 30, "quarter": 90}
SMART_NOTIFICATION_DAYS = 7

_MAIN_ACTIONS = [
    action("📊 Check Attendance", "check_attendance"),
    action("📅 Apply for Leave", "apply_leave"),
    action("🗓️ View Schedule", "view_schedule"),
]
_LEAVE_TYPE_ACTIONS = [
    action("Annual Leave", "leave_type_annual"),
    action("Sick Leave", "leave_type_sick"),
    action("Personal Leave", "leave_type_personal"),
]
_CONFIRM_ACTIONS = [action("✅ Yes, submit", "confirm"), action("❌ Cancel", "cancel")]


def lateness_category(reason: str) -> str:
    lower = reason.lower()
    if "traffic" in lower:
        return "traffic"
    if "transport" in lower or "bus" in lower or "train" in lower:
        return "transport"
    if "emergency" in lower or "urgent" in lower:
        return "emergency"
    return "other"


def _greeting_for(now: datetime) -> str:
    if now.hour < 12:
        return "Good morning"
    if now.hour < 18:
        return "Good afternoon"
    return "Good evening"


class AssistantService:
    """Rule-based chat assistant plus attendance analytics endpoints."""

    def __init__(
        self,
        *,
        attendance: AttendanceRepository,
        users: UserRepository,
        schedules: ScheduleService,
        leave: LeaveService,
        payslips: PayslipService,
        notifications: Optional[NotificationService] = None,
        classifier: Optional[IntentClassifier] = None,
        store: Optional[ConversationStore] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._schedules = schedules
        self._leave = leave
        self._payslips = payslips
        self._notifications = notifications
        self._classifier = classifier or IntentClassifier()
        self._store = store or ConversationStore()

    @property
    def store(self) -> ConversationStore:
        return self._store

    # chat

    def chat(
        self,
        *,
        user_id: int,
        role: Role,
        message: Optional[str] = None,
        action_name: Optional[str] = None,
        now: datetime | None = None,
    ) -> ChatReply:
        now = now or now_local()
        text = message.strip() if isinstance(message, str) else ""
        if not action_name and not text:
            raise ValidationError("Message or action is required")

        user = self._users.get_by_id(int(user_id))
        name = user.first_name if user else "there"
        ctx = self._store.get(user_id)
        ctx.user_name = name

        if action_name:
            reply = self._handle_action(user_id, role, name, str(action_name), ctx, now)
        else:
            self._store.add_message(user_id, "user", text, now=now)
            reply = self._handle_message(user_id, role, name, text, ctx, now)

        if reply.intent:
            ctx.last_intent = reply.intent
        self._store.add_message(user_id, "assistant", reply.message, now=now)
        return reply

    def _handle_message(
        self, user_id: int, role: Role, name: str, text: str, ctx: ConversationContext, now: datetime
    ) -> ChatReply:
        if ctx.pending_action:
            if match("confirm", text):
                reply = self._execute_pending(user_id, name, ctx, now)
                ctx.clear_pending()
                return reply
            if match("cancel", text):
                ctx.clear_pending()
                return ChatReply("No problem! I've cancelled that request. Is there anything else I can help you with?")
            return self._handle_pending_input(text, ctx, now)

        pattern = first_pattern(text)
        if pattern == "greeting":
            return ChatReply(
                f"{_greeting_for(now)}, {name}! 👋 I'm your AI assistant. I can help you with:\n\n"
                "• Check your attendance and hours\n• Apply for leave\n• View your schedule\n"
                "• Generate reports\n• Answer questions\n\nWhat would you like to do?",
                actions=list(_MAIN_ACTIONS),
                intent="greeting",
            )
        if pattern == "how_are_you":
            return ChatReply(
                "I'm doing great, thanks for asking! 😊 I'm here and ready to help you with whatever you need. "
                "What can I do for you today?"
            )
        if pattern == "thanks":
            return ChatReply("You're welcome! 😊 Is there anything else I can help you with?")
        if pattern == "goodbye":
            part = "day" if now.hour < 17 else "evening"
            return ChatReply(f"Goodbye, {name}! Have a great {part}! 👋 I'll be here whenever you need me.")
        if pattern == "help":
            return ChatReply(
                "Of course! Here's what I can do for you:\n\n"
                "**📊 Attendance:**\n• \"Check my attendance\" - View your attendance stats\n"
                "• \"How many hours did I work?\" - See your work hours\n\n"
                "**📅 Leave:**\n• \"Apply for leave\" - Start a leave request\n\n"
                "**🗓️ Schedule:**\n• \"What's my schedule?\" - View today's schedule\n\n"
                "**📄 Reports:**\n• \"Generate a report\" - Create attendance reports\n\n"
                "Just type naturally - I understand conversational language!",
                actions=list(_MAIN_ACTIONS),
                intent="help",
            )
        if pattern == "apply_leave":
            return self._start_leave(ctx)
        if pattern == "check_attendance":
            return self.attendance_answer(user_id, name, now=now)
        if pattern == "check_schedule":
            return self.schedule_answer(role, now=now)
        if pattern == "generate_report":
            return self._start_report(role, ctx)
        if pattern == "payslip":
            return self.payslip_answer(user_id, now=now)
        if pattern == "late_report":
            ctx.pending_action = "report_late"
            ctx.pending_data = {"step": "reason"}
            return ChatReply(
                "I'm sorry to hear you'll be late! No worries, it happens. Could you tell me why you'll be late? "
                "(e.g., traffic, transport issues, emergency)",
                requires_input=True,
                intent="lateness_report",
            )
        if pattern == "what_time":
            return ChatReply(f"It's currently **{now.strftime('%I:%M %p')}** ⏰")
        if pattern == "what_day":
            return ChatReply(f"Today is **{now.strftime('%A, %B')} {now.day}, {now.year}** 📅")
        if pattern == "who_am_i":
            article = "an" if role.value[0] in "aeiou" else "a"
            return ChatReply(f"You are **{name}**! 👤 You're logged in as {article} {role.value}.")

        return self._fallback(user_id, role, name, text, now)

    def _fallback(self, user_id: int, role: Role, name: str, text: str, now: datetime) -> ChatReply:
        result = self._classifier.classify(text)
        logger.debug("Chat fallback intent=%s confidence=%.2f", result.intent, result.confidence)

        if result.intent == "attendance_check":
            return self.attendance_answer(user_id, name, now=now)
        if result.intent == "payslip":
            return self.payslip_answer(user_id, now=now)
        if result.intent == "analytics":
            reply = self._insights_answer(user_id, role, now)
            reply.intent = "analytics"
            return reply
        if result.intent == "notifications" and self._notifications:
            count = self._notifications.unread_count(user_id)
            return ChatReply(
                f"You have **{count}** unread notification{'s' if count != 1 else ''}. "
                "Open the notifications panel to read them.",
                intent="notifications",
            )
        if result.intent == "user_management":
            return self._user_management_answer(role)
        if result.intent == "report_generate":
            return self._start_report(role, self._store.get(user_id))
        if result.intent == "leave_request":
            return self._start_leave(self._store.get(user_id))
        if any(word in text.lower() for word in ("schedule", "class", "meeting", "today", "tomorrow", "week")):
            return self.schedule_answer(role, now=now)

        return ChatReply(
            f"I'm here to help you, {name}! 😊 I can assist with attendance tracking, leave requests, schedules, "
            "and more. What would you like to know?",
            actions=list(_MAIN_ACTIONS),
            intent=result.intent,
        )

    def _handle_action(
        self, user_id: int, role: Role, name: str, action_name: str, ctx: ConversationContext, now: datetime
    ) -> ChatReply:
        if action_name == "check_attendance":
            return self.attendance_answer(user_id, name, now=now)
        if action_name == "apply_leave":
            return self._start_leave(ctx)
        if action_name == "view_schedule":
            return self.schedule_answer(role, now=now)
        if action_name.startswith("leave_type_"):
            leave_type = action_name[len("leave_type_"):]
            ctx.pending_action = "apply_leave"
            ctx.pending_data = {"step": "dates", "type": leave_type}
            return ChatReply(
                f"Great! You've selected **{leave_type}** leave. 📅\n\nWhat dates would you like to take off?\n\n"
                "Please enter the dates (e.g., \"from 25/01/2026 to 30/01/2026\")",
                requires_input=True,
            )
        if action_name in ("report_attendance", "report_hours"):
            return self._report_choice(action_name, role, ctx)
        if action_name == "confirm":
            if ctx.pending_action:
                reply = self._execute_pending(user_id, name, ctx, now)
                ctx.clear_pending()
                return reply
            return ChatReply("There's nothing waiting for confirmation right now.")
        if action_name == "cancel":
            ctx.clear_pending()
            return ChatReply("No problem! Is there anything else I can help you with? 😊")

        return ChatReply("I'm ready to help! What would you like to do?")

    def _start_leave(self, ctx: ConversationContext) -> ChatReply:
        ctx.pending_action = "apply_leave"
        ctx.pending_data = {"step": "type"}
        return ChatReply(
            "I'd be happy to help you apply for leave! 📅\n\nWhat type of leave would you like to apply for?\n\n"
            "• **Annual** - Regular vacation time\n• **Sick** - Health-related absence\n"
            "• **Personal** - Personal matters",
            actions=list(_LEAVE_TYPE_ACTIONS),
            intent="leave_request",
        )

    def _start_report(self, role: Role, ctx: ConversationContext) -> ChatReply:
        if role == Role.ADMIN:
            ctx.pending_action = "generate_report"
            ctx.pending_data = {"step": "type"}
            return ChatReply(
                "I can generate reports for you! 📄 What type of report would you like?\n\n"
                "• **Attendance Summary** - Overview of all attendance\n"
                "• **Hours Report** - Detailed working hours",
                actions=[action("Attendance Summary", "report_attendance"), action("Hours Report", "report_hours")],
                intent="report_generate",
            )
        return ChatReply(
            "I can show you your personal attendance report. "
            "Would you like me to get your attendance summary for this month?",
            actions=[action("Yes, show my report", "check_attendance"), action("No thanks", "cancel")],
            intent="report_generate",
        )

    def _report_choice(self, action_name: str, role: Role, ctx: ConversationContext) -> ChatReply:
        ctx.clear_pending()
        if role != Role.ADMIN:
            return ChatReply("Report generation is only available for administrators.")
        kind = "Attendance Summary" if action_name == "report_attendance" else "Hours Report"
        endpoint = "attendance-summary" if action_name == "report_attendance" else "hours-report"
        return ChatReply(
            f"Head to **Reports** and choose **{kind}** with a start and end date. "
            "PDF, CSV and Excel formats are available.",
            data={"reportType": endpoint},
            intent="report_generate",
        )

    def _handle_pending_input(self, text: str, ctx: ConversationContext, now: datetime) -> ChatReply:
        data = ctx.pending_data

        if ctx.pending_action == "apply_leave":
            if data.get("step") == "type":
                leave_type = extract_leave_type(text)
                if leave_type:
                    data["type"] = leave_type
                    data["step"] = "dates"
                    return ChatReply(
                        f"Great! You've selected **{leave_type}** leave. 📅\n\n"
                        "Now, what dates would you like to take off?\n\nPlease tell me the start and end dates "
                        "(e.g., \"from January 25 to January 30\" or \"25/01/2026 to 30/01/2026\")",
                        requires_input=True,
                    )
                return ChatReply(
                    "Which type of leave is it? Annual, sick, personal, maternity, paternity or unpaid.",
                    actions=list(_LEAVE_TYPE_ACTIONS),
                    requires_input=True,
                )
            if data.get("step") == "dates":
                start, end = extract_dates(text, today=now.date())
                if start and end:
                    data.update({"startDate": start, "endDate": end, "step": "confirm"})
                    return ChatReply(
                        "Perfect! Here's a summary of your leave request:\n\n"
                        f"📋 **Type:** {data['type']}\n📅 **From:** {start}\n📅 **To:** {end}\n\n"
                        "Shall I submit this request?",
                        actions=list(_CONFIRM_ACTIONS),
                        requires_confirmation=True,
                    )
                return ChatReply(
                    "I couldn't understand those dates. Could you try again? For example:\n"
                    "• \"from 25/01/2026 to 30/01/2026\"\n• \"January 25 to January 30\"",
                    requires_input=True,
                )
            if data.get("step") == "confirm":
                return ChatReply("Shall I submit this request?", actions=list(_CONFIRM_ACTIONS), requires_confirmation=True)

        if ctx.pending_action == "report_late":
            data["reason"] = text
            data["step"] = "confirm"
            return ChatReply(
                f"Got it! I'll log that you're late due to: \"{text}\"\n\nShould I submit this?",
                actions=list(_CONFIRM_ACTIONS),
                requires_confirmation=True,
            )

        if ctx.pending_action == "generate_report":
            lower = text.lower()
            if "hour" in lower:
                return self._report_choice("report_hours", Role.ADMIN, ctx)
            if "summary" in lower or "attendance" in lower:
                return self._report_choice("report_attendance", Role.ADMIN, ctx)

        return ChatReply("I didn't quite get that. Could you please clarify?")

    def _execute_pending(self, user_id: int, name: str, ctx: ConversationContext, now: datetime) -> ChatReply:
        data = ctx.pending_data

        if ctx.pending_action == "apply_leave":
            if not (data.get("type") and data.get("startDate") and data.get("endDate")):
                return ChatReply("I still need the leave type and dates before I can submit this request.")
            try:
                req = self._leave.create_request(
                    user_id=user_id,
                    type=data["type"],
                    start_date=data["startDate"],
                    end_date=data["endDate"],
                    reason=data.get("reason") or "Submitted via assistant",
                )
            except DomainError as exc:
                logger.info("Assistant leave submission rejected for user %s: %s", user_id, exc)
                return ChatReply(
                    f"❌ I couldn't submit your leave request: {exc}. Please try using the Leave Requests page instead.",
                    success=False,
                    error=True,
                )
            return ChatReply(
                "✅ **Leave request submitted successfully!**\n\n"
                f"📋 Type: {req.type.value}\n📅 From: {req.start_date.isoformat()}\n📅 To: {req.end_date.isoformat()}\n\n"
                "Your request is now pending approval from your manager. I'll keep you updated! 😊",
                data={"request": req.to_dict()},
                success=True,
                intent="leave_request",
            )

        if ctx.pending_action == "report_late":
            reason = data.get("reason") or "not specified"
            category = lateness_category(reason)
            if self._notifications:
                self._notifications.notify_admin(
                    "Lateness Report",
                    f"{name} reported running late on {now.date().isoformat()} ({category}): {reason}",
                    NotificationType.WARNING,
                )
            logger.info("Lateness reported by user %s (%s)", user_id, category)
            return ChatReply(
                "✅ I've logged your lateness report. Your manager has been notified. Thanks for letting us know! 👍",
                data={"category": category, "date": now.date().isoformat()},
                success=True,
                intent="lateness_report",
            )

        return ChatReply("Action completed.")

    # answers

    def attendance_answer(self, user_id: int, name: str, *, now: datetime | None = None) -> ChatReply:
        now = now or now_local()
        records = self._attendance.list_for_user(int(user_id), since=start_of_month(now))
        today = self._attendance.get_latest_for_user_on(int(user_id), now.date())

        total = len(records)
        present = sum(1 for r in records if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.OVERTIME))
        late = sum(1 for r in records if r.status == AttendanceStatus.LATE)
        total_hours = sum(float(r.hours_worked or 0) for r in records)
        avg_hours = total_hours / total if total else 0.0
        rate = round(present / total * 100, 1) if total else 0.0

        marker, verdict = "🟢", "You're doing great!"
        if rate < 80:
            marker, verdict = "🟡", "There's room for improvement."
        if rate < 60:
            marker, verdict = "🔴", "Your attendance needs attention."

        message = (
            f"Hey {name}! Here's your attendance overview for this month:\n\n"
            f"{marker} **Attendance Rate:** {rate}%\n"
            f"✅ **Days Present:** {present}\n"
            f"⏰ **Late Arrivals:** {late}\n"
            f"⏱️ **Total Hours:** {total_hours:.1f}h\n"
            f"📊 **Avg Hours/Day:** {avg_hours:.1f}h\n\n{verdict}"
        )
        if today:
            message += f"\n\n**Today:** You clocked in at {format_hhmm(today.clock_in.time())}"
            message += " and clocked out." if today.clock_out else " and are still working."
        else:
            message += "\n\n⚠️ You haven't clocked in yet today."

        return ChatReply(
            message,
            actions=[action("📅 Apply for Leave", "apply_leave"), action("🗓️ View Schedule", "view_schedule")],
            data={
                "stats": {
                    "totalDays": total,
                    "presentDays": present,
                    "lateDays": late,
                    "totalHours": round(total_hours, 2),
                    "avgHours": round(avg_hours, 2),
                    "attendanceRate": rate,
                },
                "todayRecord": today.to_dict() if today else None,
            },
            intent="attendance_check",
        )

    def schedule_answer(self, role: Role, *, now: datetime | None = None) -> ChatReply:
        now = now or now_local()
        day = DayOfWeek.from_weekday(now.weekday())
        entries = self._schedules.list_for_day(day, role=role)
        day_label = day.value.capitalize()

        if not entries:
            return ChatReply(
                f"📅 You have no scheduled activities for today ({day_label}).\n\nEnjoy your free time! 😊",
                actions=[action("📊 Check Attendance", "check_attendance")],
                data={"schedules": []},
            )

        current = now.time().replace(second=0, microsecond=0)
        lines = ["📅 Here's your schedule for today:\n"]
        for entry in entries:
            if entry.start_time <= current <= entry.end_time:
                marker = "🔵 NOW"
            elif current > entry.end_time:
                marker = "✅"
            else:
                marker = "⏳"
            line = f"{marker} **{format_hhmm(entry.start_time)} - {format_hhmm(entry.end_time)}**\n   {entry.subject or 'Work'}"
            if entry.location:
                line += f" @ {entry.location}"
            lines.append(line + "\n")
        lines.append(f"You have **{len(entries)}** activities scheduled today.")

        return ChatReply(
            "\n".join(lines),
            actions=[action("📊 Check Attendance", "check_attendance")],
            data={"schedules": [e.to_dict() for e in entries]},
        )

    def payslip_answer(self, user_id: int, *, now: datetime | None = None) -> ChatReply:
        now = now or now_local()
        est = self._payslips.estimate_current_month(user_id, now=now)
        message = (
            f"💰 **Payslip Estimate for {now.strftime('%B %Y')}**\n\n"
            f"⏱️ Hours Worked: {est.total_hours:.1f}h\n"
            f"💵 Hourly Rate: R{est.hourly_rate:g}\n"
            "───────────────\n"
            f"💰 Gross Pay: R{est.gross_pay:.2f}\n"
            f"📉 Deductions (15%): R{est.deductions:.2f}\n"
            "───────────────\n"
            f"✅ **Net Pay: R{est.net_pay:.2f}**\n\n"
            "_Note: This is an estimate. Actual payslip may vary._"
        )
        return ChatReply(message, data=est.to_dict(), intent="payslip")

    def _insights_answer(self, user_id: int, role: Role, now: datetime) -> ChatReply:
        if role == Role.ADMIN:
            stats = self.dashboard_stats(current_role=role, now=now)["stats"]
            return ChatReply(
                "Here's your dashboard overview:\n\n"
                f"• Total Active Users: {stats['totalUsers']}\n"
                f"• Present Today: {stats['presentToday']}\n"
                f"• Late Arrivals Today: {stats['lateToday']}",
                data=stats,
            )
        insights = self.insights(user_id, period="month", now=now)["insights"]
        return ChatReply("\n".join(f"• {line}" for line in insights), data={"insights": insights})

    def _user_management_answer(self, role: Role) -> ChatReply:
        if role != Role.ADMIN:
            return ChatReply("User management is only available for administrators.", intent="user_management")
        rows = self._users.list_admin_view()
        totals = Counter(r["role"] for r in rows)
        active = Counter(r["role"] for r in rows if r["status"] == "active")
        lines = [f"{r}: {active[r]}/{totals[r]} active" for r in sorted(totals)]
        return ChatReply(
            "User Statistics:\n\n" + "\n".join(lines) + "\n\nOpen **Users** to manage accounts.",
            data={"byRole": {r: {"total": totals[r], "active": active[r]} for r in totals}},
            intent="user_management",
        )

    # analytics endpoints

    def _recent_for_user(self, user_id: int, days: int, now: datetime) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(int(user_id), since=days_ago(now, days))

    def predictions(self, user_id: int, *, now: datetime | None = None) -> dict:
        now = now or now_local()
        records = self._recent_for_user(user_id, ANALYTICS_WINDOW_DAYS, now)
        return {
            "predictions": analytics.predict_attendance(records, today=now.date()),
            "dataPoints": len(records),
        }

    def anomalies(self, *, current_user_id: int, current_role: Role, now: datetime | None = None) -> dict:
        now = now or now_local()
        if current_role == Role.ADMIN:
            records = [row.record for row in self._attendance.list_since(days_ago(now, ANALYTICS_WINDOW_DAYS))]
        else:
            records = list(self._recent_for_user(current_user_id, ANALYTICS_WINDOW_DAYS, now))
        result = analytics.detect_anomalies(records)
        result["analyzedRecords"] = len(records)
        return result

    def insights(self, user_id: int, *, period: Optional[str] = None, now: datetime | None = None) -> dict:
        now = now or now_local()
        period = period if period in INSIGHT_PERIODS else "month"
        records = self._recent_for_user(user_id, INSIGHT_PERIODS[period], now)
        return {
            "insights": analytics.productivity_insights(records),
            "period": period,
            "dataPoints": len(records),
        }

    @staticmethod
    def sentiment(text) -> dict:
        if not text or not isinstance(text, str):
            raise ValidationError("Text is required")
        return analytics.analyze_sentiment(text)

    def smart_notifications(self, user_id: int, *, now: datetime | None = None) -> list[dict]:
        now = now or now_local()
        records = self._recent_for_user(user_id, SMART_NOTIFICATION_DAYS, now)
        return analytics.smart_notifications(records)

    def dashboard_stats(self, *, current_role: Role, now: datetime | None = None) -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        now = now or now_local()
        rows = self._attendance.list_since(days_ago(now, ANALYTICS_WINDOW_DAYS))
        records = [row.record for row in rows]

        today = now.date()
        todays = [r for r in records if r.work_date == today]
        present_today = {r.user_id for r in todays if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.OVERTIME)}
        late_today = {r.user_id for r in todays if r.status == AttendanceStatus.LATE}

        weekly_trend = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            day_records = [r for r in records if r.work_date == day]
            weekly_trend.append(
                {
                    "date": day.isoformat(),
                    "total": len(day_records),
                    "late": sum(1 for r in day_records if r.status == AttendanceStatus.LATE),
                    "present": sum(
                        1 for r in day_records if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.OVERTIME)
                    ),
                }
            )

        return {
            "stats": {
                "totalUsers": self._users.count_active(),
                "presentToday": len(present_today),
                "lateToday": len(late_today),
                "totalRecords": len(records),
            },
            "weeklyTrend": weekly_trend,
            "insights": analytics.productivity_insights(records),
            "anomalies": analytics.detect_anomalies(records),
        }
