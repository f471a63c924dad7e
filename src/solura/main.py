from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, backfill_employee_ids, backfill_holiday_status, list_tables
from .holidays.controller import register as register_holidays
from .shifts.controller import register as register_shifts
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def init_databases(access_db_config: dict, tenant_databases: dict[str, dict]) -> None:
    """Apply both schemas (idempotent) and backfill legacy columns on every tenant."""

    apply_schema(access_db_config, schema_path=DATABASE_DIR / "access_schema.sql")
    for tenant, db_config in tenant_databases.items():
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        updated = backfill_employee_ids(db_config)
        migrated = backfill_holiday_status(db_config)
        logger.info(
            "Tenant %s ready (tables=%d, backfilled=%s, holiday statuses migrated=%d)",
            tenant,
            len(list_tables(db_config)),
            updated,
            migrated,
        )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PORT"] = int(getattr(settings, "PORT", 10000))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        access_db_config = dict(getattr(settings, "ACCESS_DB_CONFIG"))
        tenant_databases = dict(getattr(settings, "TENANT_DATABASES", {}))
        logger.info(
            "settings=%s access=%s@%s:%s/%s tenants=%s",
            settings_module,
            access_db_config.get("user"),
            access_db_config.get("host"),
            access_db_config.get("port", 3306),
            access_db_config.get("database"),
            sorted(tenant_databases),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            init_databases(access_db_config, tenant_databases)

        container = build_container(access_db_config=access_db_config, tenant_databases=tenant_databases)

    register_users(app, container)
    register_shifts(app, container)
    register_holidays(app, container)

    return app
