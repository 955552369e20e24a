from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection per unit of work: commit when the block exits cleanly, roll back otherwise.

    Multi-statement writes (e.g. the weekly schedule bulk replace) run inside a
    single block so they succeed or fail together.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def to_json(value: Any) -> Optional[str]:
    """Serialize for JSON columns (locations, face descriptors, report parameters)."""
    if value is None:
        return None
    return json.dumps(value, separators=(",", ":"))


def from_json(value: Any) -> Any:
    # the connector hands JSON columns back as str, bytes or already-decoded values
    if value in (None, "", b""):
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    return json.loads(value) if isinstance(value, str) else value


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Turn a TIME column into ``datetime.time``.

    The pure-python connector returns ``timedelta``; the C extension and some
    drivers return ``time`` or an ``HH:MM[:SS]`` string.
    """
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        return time(minutes // 60, minutes % 60, seconds)
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            raise ValueError(f"Invalid time string: {value!r}")
    raise TypeError(f"Unsupported TIME value: {type(value)!r}")
