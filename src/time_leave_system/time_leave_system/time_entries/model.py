from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import minutes_between


@dataclass(frozen=True)
class TimeEntryCandidate:
    """A submitted entry before validation. Any field may still be missing."""

    employee_id: Optional[int]
    work_date: Optional[date]
    start: Optional[datetime]
    end: Optional[datetime]
    break_minutes: Optional[int] = None
    project: Optional[str] = None
    notes: Optional[str] = None
    entry_id: Optional[int] = None


@dataclass(frozen=True)
class NormalizedEntry:
    """An entry after rounding, break derivation and defaulting, ready to persist."""

    employee_id: int
    work_date: date
    start: datetime
    end: datetime
    break_minutes: int
    project: str
    notes: Optional[str] = None
    entry_id: Optional[int] = None
    break_derived: bool = False

    @property
    def span_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    @property
    def worked_minutes(self) -> int:
        return max(self.span_minutes - self.break_minutes, 0)


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: a persisted time entry."""

    entry_id: int
    employee_id: int
    work_date: date
    start: datetime
    end: datetime
    break_minutes: int
    project: str
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.approved_by is not None

    @property
    def span_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    @property
    def worked_minutes(self) -> int:
        return max(self.span_minutes - self.break_minutes, 0)
