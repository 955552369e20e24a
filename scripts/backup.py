"""Dump the configured database with ``mysqldump``.

Usage: python scripts/backup.py [OUTPUT_DIR]   (default: ./backups)
"""

from __future__ import annotations

import importlib
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path

from config import get_settings_module

from attendance_hub.logging_config import get_logger, setup_logging

logger = get_logger("scripts.backup")


def dump_command(db: dict) -> list[str]:
    # password goes through MYSQL_PWD so it never shows up in the process list
    return [
        "mysqldump",
        "--host", str(db.get("host", "localhost")),
        "--port", str(db.get("port", 3306)),
        "--user", str(db.get("user", "root")),
        "--single-transaction",
        "--routines",
        str(db["database"]),
    ]


def main(argv: list[str]) -> None:
    setup_logging("INFO")
    db = importlib.import_module(get_settings_module()).DB_CONFIG

    out_dir = Path(argv[0]) if argv else Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"{db['database']}_{datetime.now():%Y%m%d_%H%M%S}.sql"

    env = dict(os.environ, MYSQL_PWD=str(db.get("password") or ""))
    try:
        with out_file.open("wb") as fh:
            subprocess.run(dump_command(db), stdout=fh, stderr=subprocess.PIPE, env=env, check=True)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools first.")
    except subprocess.CalledProcessError as exc:
        out_file.unlink(missing_ok=True)
        logger.error("mysqldump failed: %s", exc.stderr.decode("utf-8", "replace").strip())
        raise SystemExit(exc.returncode)

    logger.info("Backup created: %s (%d bytes)", out_file, out_file.stat().st_size)


if __name__ == "__main__":
    main(sys.argv[1:])
