from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_LIFETIME_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_data, list_tables
from .database.connection import DBConfig
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .students.controller import register as register_students
from .users.controller import register as register_users


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the JSON API.

    Passing a ready ``container`` skips every database side effect (used by tests).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["JSON_SORT_KEYS"] = False
    app.permanent_session_lifetime = timedelta(
        days=int(getattr(settings, "SESSION_LIFETIME_DAYS", DEFAULT_SESSION_LIFETIME_DAYS))
    )

    log_level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=log_level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(log_level)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe()
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            ensure_demo_data(db_config)
            app.logger.info("demo seed ready")

        container = build_container(db_config=db_config)

    app.extensions["school_attendance"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
