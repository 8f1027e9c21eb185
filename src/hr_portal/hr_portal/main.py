from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users
from .weekly_reports.controller import register as register_weekly_reports

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.logger.setLevel(logging.DEBUG if app.config["DEBUG"] else logging.INFO)

    if container is None:
        if app.config["DEBUG"]:
            print(
                "[hr-portal] settings=", settings_module,
                " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
            if app.config["DEBUG"]:
                print(f"[hr-portal] schema ready (tables={len(list_tables(db_config))})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=PROJECT_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            if app.config["DEBUG"]:
                print("[hr-portal] demo seed ready")

        container = build_container(
            db_config=db_config,
            office_range_meters=float(getattr(settings, "OFFICE_RANGE_METERS", 500)),
        )

    register_users(app, container)
    register_attendance(app, container)
    register_weekly_reports(app, container)
    register_leave(app, container)
    register_payroll(app, container)

    return app
