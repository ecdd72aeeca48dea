from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Protocol

from .datetime_utils import iter_days, parse_iso_date

SATURDAY = 5
SUNDAY = 6


class WorkingCalendar(Protocol):
    """Holiday/working-day lookup supplied by the surrounding application."""

    def is_working_day(self, day: date) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class StaticHolidayCalendar:
    """Weekends plus a fixed set of public holidays."""

    holidays: frozenset[date] = field(default_factory=frozenset)
    weekend_days: frozenset[int] = frozenset({SATURDAY, SUNDAY})

    def is_working_day(self, day: date) -> bool:
        return day.weekday() not in self.weekend_days and day not in self.holidays

    @classmethod
    def from_iso_dates(cls, values: Iterable[str]) -> "StaticHolidayCalendar":
        return cls(holidays=frozenset(parse_iso_date(v) for v in values if v and v.strip()))


def count_working_days(calendar: WorkingCalendar, start: date, end: date) -> int:
    return sum(1 for day in iter_days(start, end) if calendar.is_working_day(day))
