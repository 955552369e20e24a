"""Create the admin account, or reset its password if it already exists.

Usage: python scripts/reset_admin.py [email] [password]
"""

from __future__ import annotations

import importlib
import os
import sys

from config import get_settings_module

from attendance_hub.core.constants import MIN_PASSWORD_LENGTH
from attendance_hub.database.bootstrap import reset_admin
from attendance_hub.logging_config import setup_logging


def main(argv: list[str]) -> None:
    setup_logging("INFO")
    settings = importlib.import_module(get_settings_module())

    email = argv[1] if len(argv) > 1 else os.getenv("ADMIN_EMAIL", "admin@attendance.local")
    password = argv[2] if len(argv) > 2 else os.getenv("ADMIN_PASSWORD", "admin123")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    reset_admin(dict(settings.DB_CONFIG), email=email, password=password)


if __name__ == "__main__":
    main(sys.argv)
