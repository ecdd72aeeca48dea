from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_date, from_db_timestamp, to_db_timestamp
from .model import TimeEntry
from .repository import TimeEntryRepository

_COLUMNS = (
    "entry_id, employee_id, work_date, start_at, end_at, break_minutes, project, notes, approved_by, approved_at"
)


def _to_entry(row: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(row["entry_id"]),
        employee_id=int(row["employee_id"]),
        work_date=from_db_date(row["work_date"]),
        start=from_db_timestamp(row["start_at"]),
        end=from_db_timestamp(row["end_at"]),
        break_minutes=int(row["break_minutes"] or 0),
        project=row["project"],
        notes=row.get("notes"),
        approved_by=int(row["approved_by"]) if row.get("approved_by") is not None else None,
        approved_at=from_db_timestamp(row.get("approved_at")),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_and_date(self, employee_id: int, work_date: date) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE employee_id=%s AND work_date=%s ORDER BY start_at",
                (int(employee_id), work_date),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_employee_between(self, employee_id: int, start: date, end: date) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM time_entries
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date, start_at
                """,
                (int(employee_id), start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        start: datetime,
        end: datetime,
        break_minutes: int,
        project: str,
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(employee_id, work_date, start_at, end_at, break_minutes, project, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    work_date,
                    to_db_timestamp(start),
                    to_db_timestamp(end),
                    int(break_minutes),
                    project,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        entry_id: int,
        work_date: date,
        start: datetime,
        end: datetime,
        break_minutes: int,
        project: str,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET work_date=%s, start_at=%s, end_at=%s, break_minutes=%s, project=%s, notes=%s,
                    approved_by=NULL, approved_at=NULL
                WHERE entry_id=%s
                """,
                (
                    work_date,
                    to_db_timestamp(start),
                    to_db_timestamp(end),
                    int(break_minutes),
                    project,
                    notes,
                    int(entry_id),
                ),
            )
            cur.execute("SELECT 1 AS ok FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            return fetchone(cur) is not None

    def mark_approved(self, entry_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries SET approved_by=%s, approved_at=%s
                WHERE entry_id=%s AND approved_by IS NULL
                """,
                (int(approved_by), to_db_timestamp(approved_at), int(entry_id)),
            )
            return cur.rowcount == 1

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
