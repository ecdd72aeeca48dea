from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.calendar import WorkingCalendar
from ..common.datetime_utils import format_iso_date
from ..core.exceptions import AuthorizationError, InvalidInputError, NotFoundError
from ..core.rules import EngineRules
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator
from .engine import aggregate, month_period, weekly_subtotals
from .model import PeriodSummary, WeeklySubtotal


class ReportService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        leave: LeaveRepository,
        employees: EmployeeRepository,
        *,
        rules: EngineRules,
        calendar: Optional[WorkingCalendar] = None,
        calculator: Optional[WorkedTimeCalculator] = None,
    ):
        self._entries = entries
        self._leave = leave
        self._employees = employees
        self._rules = rules
        self._calendar = calendar
        self._calculator = calculator or StandardWorkedTimeCalculator()

    def _employee_for(self, actor: Employee, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee does not exist", entity="employee", entity_id=int(employee_id))
        if actor.employee_id != employee.employee_id and not actor.can_decide_for(employee):
            raise AuthorizationError(
                "Not allowed to view reports of this employee",
                actor_id=actor.employee_id,
                employee_id=employee.employee_id,
            )
        return employee

    @staticmethod
    def _check_period(start: date, end: date) -> None:
        if end < start:
            raise InvalidInputError(
                "End date must not be before start date",
                start_date=format_iso_date(start),
                end_date=format_iso_date(end),
            )

    def summary(self, *, actor: Employee, employee_id: int, start: date, end: date) -> PeriodSummary:
        employee = self._employee_for(actor, employee_id)
        self._check_period(start, end)
        return aggregate(
            employee.employee_id,
            start,
            end,
            self._entries.list_for_employee_between(employee.employee_id, start, end),
            self._leave.list_for_employee(employee.employee_id, start=start, end=end),
            rules=self._rules,
            calendar=self._calendar,
            calculator=self._calculator,
        )

    def monthly_summary(self, *, actor: Employee, employee_id: int, year: int, month: int) -> PeriodSummary:
        start, end = month_period(year, month)
        return self.summary(actor=actor, employee_id=employee_id, start=start, end=end)

    def weekly(self, *, actor: Employee, employee_id: int, start: date, end: date) -> list[WeeklySubtotal]:
        employee = self._employee_for(actor, employee_id)
        self._check_period(start, end)
        return weekly_subtotals(
            self._entries.list_for_employee_between(employee.employee_id, start, end),
            employee.employee_id,
            start,
            end,
            calculator=self._calculator,
        )

    def entries_for_export(self, *, actor: Employee, employee_id: int, start: date, end: date) -> tuple[Employee, list[TimeEntry]]:
        employee = self._employee_for(actor, employee_id)
        self._check_period(start, end)
        return employee, list(self._entries.list_for_employee_between(employee.employee_id, start, end))
