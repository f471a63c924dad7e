from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Mapping, Optional

import mysql.connector

from ..core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, raw: Mapping) -> "DBConfig":
        return cls(
            host=str(raw.get("host", "localhost")),
            port=int(raw.get("port", 3306)),
            user=str(raw["user"]),
            password=str(raw.get("password", "")),
            database=str(raw["database"]),
        )


class DatabaseConnection:
    """DB connection factory for one database.

    Note: We create short-lived connections per operation; pooling is left to the driver/server.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def database(self) -> str:
        return self._config.database

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )


class TenantRegistry:
    """Maps a tenant name (the ``db`` parameter clients send) to its connection factory.

    Factories are created lazily and cached for the lifetime of the process.
    """

    def __init__(self, configs: Mapping[str, Mapping]):
        self._configs = {name: DBConfig.from_dict(cfg) for name, cfg in configs.items()}
        self._connections: dict[str, DatabaseConnection] = {}
        self._lock = threading.Lock()

    def get(self, tenant: str) -> DatabaseConnection:
        config: Optional[DBConfig] = self._configs.get(tenant)
        if config is None:
            raise NotFoundError(f"No configuration for database {tenant}")

        with self._lock:
            conn = self._connections.get(tenant)
            if conn is None:
                logger.info("Creating connection factory for tenant %s", tenant)
                conn = DatabaseConnection(config)
                self._connections[tenant] = conn
            return conn
