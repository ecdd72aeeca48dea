from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def list_for_employee_and_date(self, employee_id: int, work_date: date) -> Sequence[TimeEntry]:
        """Entries the overlap check compares against (one employee, one date)."""

        raise NotImplementedError

    def list_for_employee_between(self, employee_id: int, start: date, end: date) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        """Rewrite the entry and clear any approval it had."""

        raise NotImplementedError

    def mark_approved(self, entry_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        """Record the approval unless the entry is already approved; False otherwise."""

        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
