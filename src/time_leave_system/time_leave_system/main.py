from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .aggregation.controller import register as register_reports
from .common.calendar import StaticHolidayCalendar
from .container import Container, build_container
from .core.rules import EngineRules
from .database.bootstrap import apply_schema, ensure_demo_employees, list_tables
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .time_entries.controller import register as register_time_entries

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        rules = EngineRules.from_mapping(getattr(settings, "ENGINE_RULES", {}))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_employees(db_config, annual_leave_balance=rules.annual_leave_default_balance)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            rules=rules,
            calendar=StaticHolidayCalendar.from_iso_dates(getattr(settings, "HOLIDAYS", ())),
        )

    app.extensions["time_leave_container"] = container

    register_employees(app, container)
    register_time_entries(app, container)
    register_leave(app, container)
    register_reports(app, container)

    return app
