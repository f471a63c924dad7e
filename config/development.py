import os

from config import db_config_from_env, tenant_databases_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Shared access database: logins and per-tenant access levels
ACCESS_DB_CONFIG = db_config_from_env("ACCESS_DB", database="solura_access", password="solura")

# Tenant databases default to the access server credentials
TENANT_DATABASES = tenant_databases_from_env(
    {k: v for k, v in ACCESS_DB_CONFIG.items() if k != "database"},
    ["solura_demo"],
)

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
PORT = int(os.getenv("PORT", "10000"))

# If enabled, app will apply both schemas on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
