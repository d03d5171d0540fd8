from __future__ import annotations

import importlib

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .app_logger import get_logger, setup_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_admin, list_tables

from .container import build_container
from .claims.controller import register as register_claims
from .members.controller import register as register_members
from .reports.controller import register as register_reports
from .reports.scheduler import WeeklyReportScheduler
from .users.controller import register as register_users

logger = get_logger(__name__)


def create_app(container=None) -> Flask:
    """Build the Flask app.

    ``container`` is injectable so tests can run the HTTP layer over fakes;
    when given, database bootstrap and the scheduler are skipped.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", "")

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config)
            ensure_demo_admin(db_config)

        container = build_container(
            db_config=db_config,
            smtp_config=getattr(settings, "SMTP_CONFIG", None),
            from_name=getattr(settings, "FROM_NAME", "Pantry"),
            from_email=getattr(settings, "FROM_EMAIL", "no-reply@localhost"),
            report_recipients=getattr(settings, "REPORT_RECIPIENTS", ""),
        )

        if getattr(settings, "ENABLE_SCHEDULER", False):
            scheduler = WeeklyReportScheduler(
                container.weekly_report_service,
                cron_expression=getattr(settings, "REPORT_CRON"),
                timezone=getattr(settings, "REPORT_TIMEZONE"),
            )
            scheduler.start()
            app.extensions["weekly_report_scheduler"] = scheduler

    register_users(app, container)
    register_claims(app, container)
    register_members(app, container)
    register_reports(app, container)

    return app
