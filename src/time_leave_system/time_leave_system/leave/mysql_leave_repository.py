from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..core.exceptions import InsufficientBalanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_date, from_db_timestamp, to_db_timestamp
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, start_date, end_date, leave_type, status, created_at,
    substitute_id, notes, days_charged, decided_by, decided_at, decision_reason
"""


def _to_request(row: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(row["request_id"]),
        employee_id=int(row["employee_id"]),
        start_date=from_db_date(row["start_date"]),
        end_date=from_db_date(row["end_date"]),
        leave_type=row["leave_type"],
        status=LeaveStatus(row["status"]),
        created_at=from_db_timestamp(row["created_at"]),
        substitute_id=row.get("substitute_id"),
        notes=row.get("notes"),
        days_charged=int(row.get("days_charged") or 0),
        decided_by=row.get("decided_by"),
        decided_at=from_db_timestamp(row.get("decided_at")),
        decision_reason=row.get("decision_reason"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, start_date, end_date, leave_type, status, created_at, substitute_id, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.employee_id),
                    request.start_date,
                    request.end_date,
                    request.leave_type,
                    request.status.value,
                    to_db_timestamp(request.created_at),
                    request.substitute_id,
                    request.notes,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        where = ["employee_id=%s"]
        params: list = [int(employee_id)]
        if end is not None:
            where.append("start_date <= %s")
            params.append(end)
        if start is not None:
            where.append("end_date >= %s")
            params.append(start)
        if status is not None:
            where.append("status=%s")
            params.append(LeaveStatus(status).value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {' AND '.join(where)} ORDER BY start_date, request_id",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_by_status(self, status: LeaveStatus) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE status=%s ORDER BY created_at, request_id",
                (LeaveStatus(status).value,),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def apply_transition(
        self,
        *,
        request_id: int,
        expected_status: LeaveStatus,
        new_status: LeaveStatus,
        days_charged: int,
        decided_by: Optional[int],
        decided_at: Optional[datetime],
        decision_reason: Optional[str],
        employee_id: int,
        balance_delta: int,
        min_balance: int = 0,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, days_charged=%s, decided_by=%s, decided_at=%s, decision_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    new_status.value,
                    int(days_charged),
                    decided_by,
                    to_db_timestamp(decided_at) if decided_at else None,
                    decision_reason,
                    int(request_id),
                    expected_status.value,
                ),
            )
            if cur.rowcount != 1:
                return False

            if balance_delta:
                cur.execute(
                    """
                    UPDATE employees
                    SET annual_leave_balance = annual_leave_balance + %s
                    WHERE employee_id=%s AND (%s >= 0 OR annual_leave_balance + %s >= %s)
                    """,
                    (int(balance_delta), int(employee_id), int(balance_delta), int(balance_delta), int(min_balance)),
                )
                if cur.rowcount != 1:
                    # Raising rolls back the status change as well.
                    raise InsufficientBalanceError(
                        "Not enough leave balance",
                        employee_id=int(employee_id),
                        requested_days=-int(balance_delta),
                        min_leave_balance=int(min_balance),
                    )
            return True
