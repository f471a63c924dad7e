import os

from config import db_config_from_env, tenant_databases_from_env

SECRET_KEY = "test-secret"

ACCESS_DB_CONFIG = db_config_from_env("ACCESS_DB", database="solura_access_test", password="12345")

TENANT_DATABASES = tenant_databases_from_env(
    {k: v for k, v in ACCESS_DB_CONFIG.items() if k != "database"},
    ["solura_test"],
)

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
PORT = int(os.getenv("PORT", "10000"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
