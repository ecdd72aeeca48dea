from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..aggregation.calculator.base import WorkedTimeCalculator
from ..aggregation.calculator.standard_calculator import StandardWorkedTimeCalculator
from ..aggregation.engine import month_period, weekly_worked_minutes
from ..common.datetime_utils import format_iso_date, minutes_to_hours, now_utc, to_local, week_bounds
from ..common.locks import EmployeeLocks
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    WeeklyLimitExceededError,
)
from ..core.rules import EngineRules
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import NotificationDispatcher, NotificationPayload, dispatch_safely
from ..notifications.events import NotificationEvent
from .model import NormalizedEntry, TimeEntry, TimeEntryCandidate
from .repository import TimeEntryRepository
from .rounding.factory import RoundingStrategyFactory
from .validator import validate_and_normalize

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Use case: record, correct and total an employee's working time.

    Every mutation runs under the employee's lock: re-read the date's entries,
    validate, check the weekly ceiling, persist, then notify.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        employees: EmployeeRepository,
        *,
        rules: EngineRules,
        dispatcher: NotificationDispatcher,
        locks: Optional[EmployeeLocks] = None,
        rounding_factory: Optional[RoundingStrategyFactory] = None,
        calculator: Optional[WorkedTimeCalculator] = None,
    ):
        self._entries = entries
        self._employees = employees
        self._rules = rules
        self._dispatcher = dispatcher
        self._locks = locks or EmployeeLocks()
        self._rounding_factory = rounding_factory or RoundingStrategyFactory()
        self._calculator = calculator or StandardWorkedTimeCalculator()

    def _employee(self, employee_id: Optional[int]) -> Employee:
        if employee_id is None:
            raise InvalidInputError("Required fields are missing", fields=["employee_id"])
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee does not exist", entity="employee", entity_id=int(employee_id))
        return employee

    @staticmethod
    def _require_access(actor: Employee, employee: Employee) -> None:
        if actor.employee_id == employee.employee_id and actor.is_active:
            return
        if not actor.can_decide_for(employee):
            raise AuthorizationError(
                "Not allowed to access time entries of this employee",
                actor_id=actor.employee_id,
                employee_id=employee.employee_id,
            )

    def get(self, entry_id: int) -> TimeEntry:
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Time entry does not exist", entity="time_entry", entity_id=int(entry_id))
        return entry

    def _check_weekly(self, entry: NormalizedEntry) -> None:
        monday, sunday = week_bounds(entry.work_date)
        week = self._entries.list_for_employee_between(entry.employee_id, monday, sunday)
        total = entry.worked_minutes + weekly_worked_minutes(
            week,
            entry.employee_id,
            entry.work_date,
            exclude_id=entry.entry_id,
            calculator=self._calculator,
        )
        if total > self._rules.max_weekly_minutes:
            raise WeeklyLimitExceededError(
                "Weekly working time limit exceeded",
                week_start=format_iso_date(monday),
                worked_hours=str(minutes_to_hours(total)),
                max_weekly_hours=self._rules.max_weekly_hours,
            )

    def _normalize(self, candidate: TimeEntryCandidate) -> NormalizedEntry:
        try:
            existing = (
                self._entries.list_for_employee_and_date(int(candidate.employee_id), candidate.work_date)
                if candidate.work_date is not None
                else []
            )
            entry = validate_and_normalize(
                candidate,
                existing,
                self._rules,
                rounding_factory=self._rounding_factory,
            )
            self._check_weekly(entry)
        except DomainError as e:
            logger.info("Time entry for employee %s rejected (%s): %s", candidate.employee_id, e.rule, e.message)
            raise
        return entry

    def _notify(self, event: NotificationEvent, entry: TimeEntry, employee: Employee, actor: Employee) -> None:
        manager = self._employees.get_by_id(employee.manager_id) if employee.manager_id else None
        dispatch_safely(
            self._dispatcher,
            event,
            NotificationPayload(subject=entry, employee=employee, manager=manager, actor_id=actor.employee_id),
        )

    def submit(self, *, actor: Employee, candidate: TimeEntryCandidate) -> TimeEntry:
        employee = self._employee(candidate.employee_id)
        self._require_access(actor, employee)
        if not employee.is_active:
            raise InvalidInputError("Employee is disabled", employee_id=employee.employee_id)
        if candidate.entry_id is not None:
            raise InvalidInputError("A new entry must not carry an id", entry_id=candidate.entry_id)

        with self._locks.hold(employee.employee_id):
            entry = self._normalize(candidate)
            entry_id = self._entries.create(
                employee_id=entry.employee_id,
                work_date=entry.work_date,
                start=entry.start,
                end=entry.end,
                break_minutes=entry.break_minutes,
                project=entry.project,
                notes=entry.notes,
            )

        saved = self.get(entry_id)
        logger.info(
            "Time entry %s created for employee %s on %s (%s min)",
            entry_id,
            employee.employee_id,
            format_iso_date(saved.work_date),
            saved.worked_minutes,
        )
        self._notify(NotificationEvent.TIME_ENTRY_CREATED, saved, employee, actor)
        return saved

    def update(self, *, actor: Employee, entry_id: int, candidate: TimeEntryCandidate) -> TimeEntry:
        current = self.get(entry_id)
        employee = self._employee(current.employee_id)
        self._require_access(actor, employee)
        if candidate.employee_id is not None and int(candidate.employee_id) != current.employee_id:
            raise InvalidInputError("An entry cannot be moved to another employee", entry_id=current.entry_id)

        candidate = TimeEntryCandidate(
            employee_id=current.employee_id,
            work_date=candidate.work_date or current.work_date,
            start=candidate.start or to_local(current.start, self._rules.timezone),
            end=candidate.end or to_local(current.end, self._rules.timezone),
            break_minutes=candidate.break_minutes,
            project=candidate.project if candidate.project is not None else current.project,
            notes=candidate.notes if candidate.notes is not None else current.notes,
            entry_id=current.entry_id,
        )

        with self._locks.hold(employee.employee_id):
            entry = self._normalize(candidate)
            ok = self._entries.update(
                entry_id=current.entry_id,
                work_date=entry.work_date,
                start=entry.start,
                end=entry.end,
                break_minutes=entry.break_minutes,
                project=entry.project,
                notes=entry.notes,
            )
            if not ok:
                raise NotFoundError("Time entry does not exist", entity="time_entry", entity_id=current.entry_id)

        saved = self.get(current.entry_id)
        logger.info("Time entry %s updated by %s", saved.entry_id, actor.employee_id)
        self._notify(NotificationEvent.TIME_ENTRY_UPDATED, saved, employee, actor)
        return saved

    def approve(self, *, actor: Employee, entry_id: int) -> TimeEntry:
        """Sign off an entry. Only the employee's manager or an administrator may, never the employee."""

        current = self.get(entry_id)
        employee = self._employee(current.employee_id)
        if actor.employee_id == employee.employee_id or not actor.can_decide_for(employee):
            raise AuthorizationError(
                "Not allowed to approve time entries of this employee",
                actor_id=actor.employee_id,
                employee_id=employee.employee_id,
            )

        with self._locks.hold(employee.employee_id):
            if not self._entries.mark_approved(current.entry_id, approved_by=actor.employee_id, approved_at=now_utc()):
                raise InvalidTransitionError("Time entry is already approved", entry_id=current.entry_id)

        saved = self.get(current.entry_id)
        logger.info("Time entry %s approved by %s", saved.entry_id, actor.employee_id)
        self._notify(NotificationEvent.TIME_ENTRY_APPROVED, saved, employee, actor)
        return saved

    def delete(self, *, actor: Employee, entry_id: int) -> None:
        current = self.get(entry_id)
        employee = self._employee(current.employee_id)
        self._require_access(actor, employee)

        with self._locks.hold(employee.employee_id):
            if not self._entries.delete(current.entry_id):
                raise NotFoundError("Time entry does not exist", entity="time_entry", entity_id=current.entry_id)

        logger.info("Time entry %s deleted by %s", current.entry_id, actor.employee_id)
        self._notify(NotificationEvent.TIME_ENTRY_DELETED, current, employee, actor)

    def list_for_employee(
        self,
        *,
        actor: Employee,
        employee_id: int,
        start: date,
        end: date,
    ) -> Sequence[TimeEntry]:
        employee = self._employee(employee_id)
        self._require_access(actor, employee)
        if end < start:
            raise InvalidInputError(
                "End date must not be before start date",
                start_date=format_iso_date(start),
                end_date=format_iso_date(end),
            )
        return self._entries.list_for_employee_between(employee.employee_id, start, end)

    def monthly_total(self, *, actor: Employee, employee_id: int, year: int, month: int) -> dict:
        start, end = month_period(year, month)
        entries = self.list_for_employee(actor=actor, employee_id=employee_id, start=start, end=end)
        minutes = sum(self._calculator.worked_minutes(e) for e in entries)
        return {
            "employee_id": int(employee_id),
            "year": int(year),
            "month": int(month),
            "entry_count": len(entries),
            "total_minutes": minutes,
            "total_hours": str(minutes_to_hours(minutes)),
        }
