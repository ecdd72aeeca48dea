from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, name, email, department, manager_id, substitute_id,
    annual_leave_balance, accrual_cap, role, is_active
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        name=row["name"],
        email=row["email"],
        department=row["department"],
        manager_id=row.get("manager_id"),
        substitute_id=row.get("substitute_id"),
        annual_leave_balance=int(row["annual_leave_balance"]),
        accrual_cap=row.get("accrual_cap"),
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        where = "" if include_inactive else "WHERE is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY name")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        email: str,
        department: str,
        manager_id: Optional[int],
        substitute_id: Optional[int],
        annual_leave_balance: int,
        accrual_cap: Optional[int],
        role: Role,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    name, email, department, manager_id, substitute_id,
                    annual_leave_balance, accrual_cap, role
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, email, department, manager_id, substitute_id, int(annual_leave_balance), accrual_cap, role.value),
            )
            return int(cur.lastrowid)

    def update_profile(
        self,
        *,
        employee_id: int,
        name: str,
        email: str,
        department: str,
        manager_id: Optional[int],
        substitute_id: Optional[int],
        accrual_cap: Optional[int],
        role: Role,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, email=%s, department=%s, manager_id=%s, substitute_id=%s,
                    accrual_cap=%s, role=%s
                WHERE employee_id=%s
                """,
                (name, email, department, manager_id, substitute_id, accrual_cap, role.value, int(employee_id)),
            )
            return self._exists(cur, employee_id)

    def set_active(self, employee_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s WHERE employee_id=%s",
                (1 if is_active else 0, int(employee_id)),
            )
            return self._exists(cur, employee_id)

    def set_balance(self, employee_id: int, balance: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET annual_leave_balance=%s WHERE employee_id=%s",
                (int(balance), int(employee_id)),
            )
            return self._exists(cur, employee_id)

    @staticmethod
    def _exists(cur, employee_id: int) -> bool:
        # rowcount is 0 for an UPDATE that matched but changed nothing.
        cur.execute("SELECT 1 AS ok FROM employees WHERE employee_id=%s", (int(employee_id),))
        return fetchone(cur) is not None
