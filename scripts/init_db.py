from __future__ import annotations

import importlib
from pathlib import Path

from config import get_settings_module

from attendance_hub.database.bootstrap import apply_schema, list_tables
from attendance_hub.logging_config import get_logger, setup_logging

logger = get_logger("scripts.init_db")


def main() -> None:
    setup_logging("INFO")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
