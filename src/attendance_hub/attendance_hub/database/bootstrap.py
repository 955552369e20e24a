from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..logging_config import get_logger
from .connection import DBConfig, DatabaseConnection

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[4] / "database" / "schema.sql"
SEED_PATH = Path(__file__).resolve().parents[4] / "database" / "seed.sql"

DEMO_USERS = (
    # (name, email, password, role, department)
    ("System Admin", "admin@attendance.local", "admin123", "admin", "Management"),
    ("Demo Employee", "employee@attendance.local", "employee123", "employee", "Operations"),
    ("Demo Student", "student@attendance.local", "student123", "student", None),
)


def _connect(db_config: dict, *, with_database: bool = True):
    # not the shared instance: bootstrap may run against a different DB_CONFIG than the app
    return DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)


# quoted strings, statement terminators, and everything else
_SQL_TOKEN_RE = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|;|[^;'\"]+|['\"]", re.S)
_DB_SWITCH_RE = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.I)


def split_sql_script(sql: str) -> Iterable[str]:
    """Yield the statements of a schema/seed script.

    Full-line ``--`` comments are dropped; ``;`` inside quotes does not end a
    statement. ``CREATE DATABASE`` / ``USE`` lines are skipped so the scripts
    run against whichever database ``DB_CONFIG`` names.
    """
    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    current: list[str] = []
    for token in _SQL_TOKEN_RE.findall(body):
        if token != ";":
            current.append(token)
            continue
        stmt = "".join(current).strip()
        current = []
        if stmt and not _DB_SWITCH_RE.match(stmt):
            yield stmt
    tail = "".join(current).strip()
    if tail and not _DB_SWITCH_RE.match(tail):
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    conn = _connect(db_config, with_database=False)
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def _run_script(db_config: dict, path: str | Path) -> int:
    statements = list(split_sql_script(Path(path).read_text(encoding="utf-8")))
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
    return len(statements)


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Schema applied from %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Seed data applied from %s (%d statements)", seed_path, count)


def upsert_user(cur, *, name: str, email: str, password: str, role: str, department: str | None = None) -> None:
    password_hash = generate_password_hash(password)
    cur.execute("SELECT id FROM users WHERE email=%s", (email,))
    existing = cur.fetchone()
    if existing:
        cur.execute(
            """
            UPDATE users
            SET name=%s, password_hash=%s, role=%s, department=%s, status='active'
            WHERE email=%s
            """,
            (name, password_hash, role, department, email),
        )
    else:
        cur.execute(
            """
            INSERT INTO users (name, email, password_hash, role, department, status)
            VALUES (%s, %s, %s, %s, %s, 'active')
            """,
            (name, email, password_hash, role, department),
        )


def ensure_demo_users(db_config: dict) -> None:
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        for name, email, password, role, department in DEMO_USERS:
            upsert_user(cur, name=name, email=email, password=password, role=role, department=department)
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users ready (%d accounts)", len(DEMO_USERS))


def reset_admin(db_config: dict, *, email: str, password: str, name: str = "System Admin") -> None:
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        upsert_user(cur, name=name, email=email.lower(), password=password, role="admin", department="Management")
        conn.commit()
    finally:
        conn.close()
    logger.info("Admin account %s created or reset", email)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
