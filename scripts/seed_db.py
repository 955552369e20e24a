from __future__ import annotations

import importlib
from pathlib import Path

from config import get_settings_module

from attendance_hub.database.bootstrap import apply_seed_sql, ensure_demo_users
from attendance_hub.logging_config import get_logger, setup_logging

logger = get_logger("scripts.seed_db")


def main() -> None:
    setup_logging("INFO")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_seed_sql(db_config, seed_path=seed_path)
    ensure_demo_users(db_config)

    logger.info(
        "Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
