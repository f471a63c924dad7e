from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from solura.database.bootstrap import list_tables
from solura.main import init_databases


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    access_db_config = dict(settings.ACCESS_DB_CONFIG)
    tenant_databases = dict(settings.TENANT_DATABASES)

    init_databases(access_db_config, tenant_databases)
    print(
        "OK: Applied access_schema.sql -> "
        f"{access_db_config.get('user')}@{access_db_config.get('host')}:{access_db_config.get('port', 3306)}/{access_db_config.get('database')} "
        f"(tables={len(list_tables(access_db_config))})"
    )
    for tenant in sorted(tenant_databases):
        print(f"OK: Applied schema.sql -> {tenant} (tables={len(list_tables(tenant_databases[tenant]))})")


if __name__ == "__main__":
    main()
