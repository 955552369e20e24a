from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "id, email, password_hash, name, role, status, phone, department, facial_descriptors, created_at"

_UPDATABLE = {"email", "password_hash", "name", "role", "status", "phone", "department", "facial_descriptors"}


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        email=row["email"],
        name=row["name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        status=UserStatus(row.get("status") or UserStatus.ACTIVE.value),
        phone=row.get("phone"),
        department=row.get("department"),
        facial_descriptors=from_json(row.get("facial_descriptors")),
        created_at=row.get("created_at"),
    )


def _db_value(column: str, value: Any) -> Any:
    if column == "facial_descriptors":
        return to_json(value)
    if column in {"role", "status"} and value is not None:
        return value.value
    return value


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        status: UserStatus = UserStatus.ACTIVE,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        facial_descriptors: Optional[list] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, password_hash, name, role, status, phone, department, facial_descriptors)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (email, password_hash, name, role.value, status.value, phone, department, to_json(facial_descriptors)),
            )
            return int(cur.lastrowid)

    def update_fields(self, user_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in fields if c in _UPDATABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [_db_value(c, fields[c]) for c in columns] + [user_id]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {assignments} WHERE id=%s", tuple(params))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return cur.rowcount > 0

    def list_face_candidates(self) -> Sequence[Tuple[int, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, facial_descriptors
                FROM users
                WHERE status='active' AND facial_descriptors IS NOT NULL
                """
            )
            return [(int(r["id"]), from_json(r["facial_descriptors"])) for r in fetchall(cur)]

    def list_admin_view(
        self,
        *,
        role: Optional[Role] = None,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        sql = """
            SELECT u.id, u.email, u.name, u.role, u.status, u.phone, u.department, u.created_at,
                   (u.facial_descriptors IS NOT NULL) AS has_facial_data,
                   COUNT(a.id) AS attendance_count,
                   COALESCE(SUM(a.hours_worked), 0) AS total_hours
            FROM users u
            LEFT JOIN attendance a ON a.user_id = u.id
            WHERE 1=1
        """
        params: list = []
        if role:
            sql += " AND u.role=%s"
            params.append(role.value)
        if status:
            sql += " AND u.status=%s"
            params.append(status.value)
        if search:
            sql += " AND (u.name LIKE %s OR u.email LIKE %s)"
            like = f"%{search}%"
            params.extend([like, like])
        sql += " GROUP BY u.id ORDER BY u.created_at DESC, u.id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)
        out: list[dict] = []
        for r in rows:
            out.append(
                {
                    "id": int(r["id"]),
                    "email": r["email"],
                    "name": r["name"],
                    "role": r["role"],
                    "status": r["status"],
                    "phone": r.get("phone"),
                    "department": r.get("department"),
                    "has_facial_data": bool(r.get("has_facial_data")),
                    "created_at": r["created_at"].isoformat() if r.get("created_at") else None,
                    "attendance_count": int(r.get("attendance_count") or 0),
                    "total_hours": round(float(r.get("total_hours") or 0), 2),
                }
            )
        return out

    def get_stats(self, user_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_records,
                       SUM(CASE WHEN status IN ('present', 'overtime') THEN 1 ELSE 0 END) AS present_days,
                       SUM(CASE WHEN status='late' THEN 1 ELSE 0 END) AS late_days,
                       COALESCE(SUM(hours_worked), 0) AS total_hours,
                       MIN(clock_in) AS first_clock_in,
                       MAX(clock_in) AS last_clock_in
                FROM attendance
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur) or {}
        return {
            "total_records": int(row.get("total_records") or 0),
            "present_days": int(row.get("present_days") or 0),
            "late_days": int(row.get("late_days") or 0),
            "total_hours": round(float(row.get("total_hours") or 0), 2),
            "first_clock_in": row["first_clock_in"].isoformat() if row.get("first_clock_in") else None,
            "last_clock_in": row["last_clock_in"].isoformat() if row.get("last_clock_in") else None,
        }

    def first_admin_id(self) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM users WHERE role='admin' AND status='active' ORDER BY id LIMIT 1")
            row = fetchone(cur)
            return int(row["id"]) if row else None

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS cnt FROM users WHERE status='active'")
            row = fetchone(cur)
            return int(row["cnt"]) if row else 0
