from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from time_leave_system.core.enums import LeaveStatus, Role
from time_leave_system.core.exceptions import InsufficientBalanceError
from time_leave_system.employees.model import Employee
from time_leave_system.leave.model import LeaveRequest
from time_leave_system.time_entries.model import TimeEntry

BERLIN = ZoneInfo("Europe/Berlin")

ADMIN_ID = 1
MANAGER_ID = 2
EMPLOYEE_ID = 3
OTHER_ID = 4


def berlin(*args) -> datetime:
    return datetime(*args, tzinfo=BERLIN)


class InMemoryEmployeeRepository:
    def __init__(self, employees=()):
        self._rows: dict[int, Employee] = {e.employee_id: e for e in employees}
        self._next_id = max(self._rows, default=0) + 1

    def get_by_id(self, employee_id):
        return self._rows.get(int(employee_id))

    def get_by_email(self, email):
        return next((e for e in self._rows.values() if e.email == email), None)

    def list_all(self, *, include_inactive=False):
        rows = sorted(self._rows.values(), key=lambda e: e.name)
        return [e for e in rows if include_inactive or e.is_active]

    def create(self, *, name, email, department, manager_id, substitute_id, annual_leave_balance, accrual_cap, role):
        eid = self._next_id
        self._next_id += 1
        self._rows[eid] = Employee(
            employee_id=eid,
            name=name,
            email=email,
            department=department,
            manager_id=manager_id,
            substitute_id=substitute_id,
            annual_leave_balance=annual_leave_balance,
            accrual_cap=accrual_cap,
            role=Role(role),
        )
        return eid

    def update_profile(self, *, employee_id, **fields):
        current = self._rows.get(int(employee_id))
        if not current:
            return False
        self._rows[current.employee_id] = replace(current, **fields)
        return True

    def set_active(self, employee_id, is_active):
        return self.update_profile(employee_id=employee_id, is_active=bool(is_active))

    def set_balance(self, employee_id, balance):
        return self.update_profile(employee_id=employee_id, annual_leave_balance=int(balance))


class InMemoryTimeEntryRepository:
    def __init__(self):
        self._rows: dict[int, TimeEntry] = {}
        self._next_id = 1

    def list_for_employee_and_date(self, employee_id, work_date):
        return [e for e in self._rows.values() if e.employee_id == employee_id and e.work_date == work_date]

    def list_for_employee_between(self, employee_id, start, end):
        rows = [e for e in self._rows.values() if e.employee_id == employee_id and start <= e.work_date <= end]
        return sorted(rows, key=lambda e: (e.work_date, e.start))

    def get_by_id(self, entry_id):
        return self._rows.get(int(entry_id))

    def create(self, *, employee_id, work_date, start, end, break_minutes, project, notes):
        eid = self._next_id
        self._next_id += 1
        self._rows[eid] = TimeEntry(
            entry_id=eid,
            employee_id=employee_id,
            work_date=work_date,
            start=start,
            end=end,
            break_minutes=break_minutes,
            project=project,
            notes=notes,
        )
        return eid

    def update(self, *, entry_id, **fields):
        current = self._rows.get(int(entry_id))
        if not current:
            return False
        self._rows[current.entry_id] = replace(current, approved_by=None, approved_at=None, **fields)
        return True

    def mark_approved(self, entry_id, *, approved_by, approved_at):
        current = self._rows.get(int(entry_id))
        if not current or current.is_approved:
            return False
        self._rows[current.entry_id] = replace(current, approved_by=approved_by, approved_at=approved_at)
        return True

    def delete(self, entry_id):
        return self._rows.pop(int(entry_id), None) is not None


class InMemoryLeaveRepository:
    """Applies status and balance together, like the MySQL transaction."""

    def __init__(self, employees: InMemoryEmployeeRepository):
        self._employees = employees
        self._rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def create(self, request: LeaveRequest) -> int:
        rid = self._next_id
        self._next_id += 1
        self._rows[rid] = replace(request, request_id=rid)
        return rid

    def get_by_id(self, request_id):
        return self._rows.get(int(request_id))

    def list_for_employee(self, employee_id, *, start: Optional[date] = None, end: Optional[date] = None, status=None):
        out = []
        for r in self._rows.values():
            if r.employee_id != employee_id:
                continue
            if end is not None and r.start_date > end:
                continue
            if start is not None and r.end_date < start:
                continue
            if status is not None and r.status != status:
                continue
            out.append(r)
        return sorted(out, key=lambda r: (r.start_date, r.request_id))

    def list_by_status(self, status):
        return [r for r in self._rows.values() if r.status == status]

    def apply_transition(
        self,
        *,
        request_id,
        expected_status: LeaveStatus,
        new_status: LeaveStatus,
        days_charged,
        decided_by,
        decided_at: Optional[datetime],
        decision_reason,
        employee_id,
        balance_delta,
        min_balance=0,
    ):
        current = self._rows.get(int(request_id))
        if not current or current.status != expected_status:
            return False
        employee = self._employees.get_by_id(employee_id)
        if balance_delta < 0 and employee.annual_leave_balance + balance_delta < min_balance:
            raise InsufficientBalanceError("Not enough leave balance", requested_days=-balance_delta)
        self._rows[current.request_id] = replace(
            current,
            status=new_status,
            days_charged=days_charged,
            decided_by=decided_by,
            decided_at=decided_at,
            decision_reason=decision_reason,
        )
        if balance_delta:
            self._employees.set_balance(employee_id, employee.annual_leave_balance + balance_delta)
        return True


class RecordingDispatcher:
    def __init__(self):
        self.events = []

    def dispatch(self, event, payload):
        self.events.append((event, payload))

    @property
    def names(self):
        return [e.value for e, _ in self.events]


class FailingDispatcher:
    def dispatch(self, event, payload):
        raise ConnectionError("mail server unreachable")
