from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..holidays.model import HolidayRequest

logger = logging.getLogger(__name__)

# Tables whose rows carry a denormalized (name, lastName) pair next to employee_id.
_LEGACY_KEYED_TABLES = ("rota", "shift_requests", "ConfirmedRota", "Holiday")


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config["database"]),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema files compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips '--' comment lines).
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s to %s", Path(schema_path).name, target.database)


def backfill_employee_ids(db_config: dict) -> dict[str, int]:
    """Fill missing ``employee_id`` values from the legacy (name, lastName) pair.

    Only rows whose name pair matches exactly one employee are updated; ambiguous
    pairs are left NULL and reported in the log. Returns updated row counts per table.
    """

    target = _as_target(db_config)
    conn = _connect(target)
    updated: dict[str, int] = {}
    try:
        cur = conn.cursor()
        for table in _LEGACY_KEYED_TABLES:
            cur.execute(
                f"""
                UPDATE `{table}` t
                JOIN (
                    SELECT MIN(id) AS id, name, lastName
                    FROM Employees
                    GROUP BY name, lastName
                    HAVING COUNT(*) = 1
                ) e ON e.name = t.name AND e.lastName = t.lastName
                SET t.employee_id = e.id
                WHERE t.employee_id IS NULL
                """
            )
            updated[table] = int(cur.rowcount)

            cur.execute(f"SELECT COUNT(*) FROM `{table}` WHERE employee_id IS NULL")
            (orphans,) = cur.fetchone()
            if orphans:
                logger.warning("%s.%s: %d rows still without employee_id", target.database, table, orphans)
        conn.commit()
    finally:
        conn.close()
    return updated


def _migrate_legacy_accepted(cur) -> int:
    cur.execute("SELECT id, accepted, who FROM Holiday WHERE accepted IS NOT NULL")
    rows = cur.fetchall()
    for holiday_id, accepted, who in rows:
        status, payment_type = HolidayRequest.from_legacy(accepted, who)
        cur.execute(
            "UPDATE Holiday SET status=%s, payment_type=%s, accepted=NULL WHERE id=%s",
            (status.value, payment_type.value, int(holiday_id)),
        )
    return len(rows)


def backfill_holiday_status(db_config: dict) -> int:
    """Move the legacy ``accepted`` string of each holiday into ``status`` and ``payment_type``.

    Migrated rows get ``accepted`` cleared, so running this again is a no-op. Returns the row count.
    """

    target = _as_target(db_config)
    conn = _connect(target)
    try:
        migrated = _migrate_legacy_accepted(conn.cursor())
        conn.commit()
    finally:
        conn.close()
    if migrated:
        logger.info("%s.Holiday: migrated %d legacy accepted values", target.database, migrated)
    return migrated


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
