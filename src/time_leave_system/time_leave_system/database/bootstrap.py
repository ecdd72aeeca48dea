from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
ENGINE_TABLES = ("employees", "time_entries", "leave_requests")

# (name, email, department, role, manager email)
DEMO_EMPLOYEES = (
    ("Admin Demo", "admin@example.com", "HR", "ADMIN", None),
    ("Maria Manager", "manager@example.com", "Engineering", "MANAGER", None),
    ("Erik Employee", "employee@example.com", "Engineering", "EMPLOYEE", "manager@example.com"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal splitter: ';' ends a statement unless inside quotes; '--' comments are dropped.
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                buf.append(ch)
                escape = False
                continue
            if ch == "\\":
                buf.append(ch)
                escape = True
                continue
            if ch in ("'", '"'):
                if quote is None:
                    quote = ch
                elif quote == ch:
                    quote = None
                buf.append(ch)
                continue
            if ch == ";" and quote is None:
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
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_employees(db_config: dict, *, annual_leave_balance: int = 30) -> dict[str, int]:
    """Insert the demo directory if missing and return e-mail -> employee_id. Safe to run repeatedly."""

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def employee_id(email: str) -> Optional[int]:
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            row = cur.fetchone()
            return int(row["employee_id"]) if row else None

        seeded: dict[str, int] = {}
        for name, email, department, role, manager_email in DEMO_EMPLOYEES:
            existing = employee_id(email)
            if existing is not None:
                seeded[email] = existing
                continue
            manager_id = employee_id(manager_email) if manager_email else None
            cur.execute(
                """
                INSERT INTO employees (name, email, department, manager_id, annual_leave_balance, role)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (name, email, department, manager_id, int(annual_leave_balance), role),
            )
            seeded[email] = int(cur.lastrowid)
            logger.info("Demo employee %s created", email)

        conn.commit()
        return seeded
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
