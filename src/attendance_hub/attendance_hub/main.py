from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .common.errors import register_error_handlers
from .common.security import init_jwt
from .container import Container, build_container
from .core.constants import JWT_EXPIRES_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .logging_config import get_logger, setup_logging
from .settings.service import OfficeDefaults

from .assistant.controller import register as register_assistant
from .attendance.controller import register as register_attendance
from .leave.controller import register as register_leave
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)
    # groupedByDay is ordered monday to sunday
    app.json.sort_keys = False

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    debug = bool(getattr(settings, "DEBUG", False))
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), debug)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = debug
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    CORS(app, origins=getattr(settings, "CORS_ORIGINS", "*"))
    init_jwt(
        app,
        secret_key=getattr(settings, "JWT_SECRET_KEY", app.secret_key),
        expires_days=int(getattr(settings, "JWT_EXPIRES_DAYS", JWT_EXPIRES_DAYS)),
    )
    register_error_handlers(app)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=PROJECT_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("Demo seed ready")

        reports_dir = PROJECT_ROOT / getattr(settings, "REPORTS_DIR", "reports")
        container = build_container(
            db_config=db_config,
            reports_dir=reports_dir,
            office_defaults=OfficeDefaults.from_settings(settings),
        )

    register_users(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_schedules(app, container)
    register_settings(app, container)
    register_notifications(app, container)
    register_reports(app, container)
    register_assistant(app, container)

    @app.get("/health", endpoint="health")
    def health():
        if container.conn.ping():
            return jsonify({"status": "healthy"})
        return jsonify({"status": "unhealthy"}), 503

    return app
