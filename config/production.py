import os

from config import db_config_from_env, tenant_databases_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

ACCESS_DB_CONFIG = db_config_from_env("ACCESS_DB", database="solura_access")

TENANT_DATABASES = tenant_databases_from_env(
    {k: v for k, v in ACCESS_DB_CONFIG.items() if k != "database"},
    [],
)

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "10000"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
