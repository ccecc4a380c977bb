from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.guards import EXTENSION_KEY
from .common.http import ApiJSONProvider, register_error_handlers
from .container import Container, build_container
from .core.constants import LOG_FORMAT
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_admin, list_tables
from .employees.controller import register as register_employees
from .invoices.controller import register as register_invoices
from .journal.controller import register as register_journal
from .ledger.controller import register as register_ledger
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    app.json = ApiJSONProvider(app)
    register_error_handlers(app)

    if container is None:
        logger.info(
            f"settings={settings_module} "
            f"db={db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info(f"Schema ready (tables={len(list_tables(db_config))})")
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_admin(db_config)
            logger.info("Demo seed ready")
        container = build_container(db_config=db_config, settings=settings)

    app.extensions[EXTENSION_KEY] = container

    register_auth(app, container)
    register_accounts(app, container)
    register_journal(app, container)
    register_ledger(app, container)
    register_invoices(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_notifications(app, container)

    return app
