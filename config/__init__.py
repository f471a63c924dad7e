import json
import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, development by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def db_config_from_env(prefix: str = "DB", *, database: str, password: str = "") -> dict:
    return {
        "host": os.getenv(f"{prefix}_HOST", "localhost"),
        "port": int(os.getenv(f"{prefix}_PORT", "3306")),
        "user": os.getenv(f"{prefix}_USER", "root"),
        "password": os.getenv(f"{prefix}_PASSWORD", password),
        "database": os.getenv(f"{prefix}_NAME", database),
    }


def tenant_databases_from_env(base: dict, default_names: list[str]) -> dict[str, dict]:
    """Tenant name -> db config.

    ``TENANT_DATABASES`` holds either a JSON list of names or a JSON object of
    per-tenant overrides. Missing keys fall back to ``base`` and the database
    name defaults to the tenant name.
    """
    raw = os.getenv("TENANT_DATABASES")
    overrides = json.loads(raw) if raw else list(default_names)
    if isinstance(overrides, list):
        overrides = {name: {} for name in overrides}

    tenants = {}
    for name, cfg in overrides.items():
        tenants[name] = {**base, "database": name, **(cfg or {})}
    return tenants
