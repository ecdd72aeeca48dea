"""Period aggregation of time entries and approved leave.

Everything here is a pure fold over the inputs: the same entries, leave
requests, period and rules always give the same summary, whatever order
the inputs come in.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from ..common.calendar import StaticHolidayCalendar, WorkingCalendar, count_working_days
from ..common.datetime_utils import (
    clip_range,
    inclusive_day_count,
    minutes_to_hours,
    month_bounds,
    percentage,
    week_bounds,
)
from ..core.enums import LeaveStatus
from ..core.rules import EngineRules
from ..leave.lifecycle import count_leave_days
from ..leave.model import LeaveRequest
from ..time_entries.model import TimeEntry
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator
from .model import PeriodSummary, ProjectShare, WeeklySubtotal


def month_period(year: int, month: int) -> tuple[date, date]:
    return month_bounds(year, month)


def _in_period(entries: Iterable[TimeEntry], employee_id: int, start: date, end: date) -> list[TimeEntry]:
    return [e for e in entries if e.employee_id == employee_id and start <= e.work_date <= end]


def _project_shares(
    entries: list[TimeEntry],
    total_minutes: int,
    calculator: WorkedTimeCalculator,
) -> tuple[ProjectShare, ...]:
    per_project: dict[str, int] = defaultdict(int)
    for e in entries:
        per_project[e.project] += calculator.worked_minutes(e)

    return tuple(
        ProjectShare(
            project=project,
            worked_minutes=minutes,
            worked_hours=minutes_to_hours(minutes),
            share_percent=percentage(minutes, total_minutes),
        )
        for project, minutes in sorted(per_project.items())
    )


def approved_leave_days(
    leave_requests: Iterable[LeaveRequest],
    employee_id: int,
    period_start: date,
    period_end: date,
    rules: EngineRules,
    calendar: Optional[WorkingCalendar] = None,
) -> int:
    """Approved leave days falling inside the period, per request clipped to it."""

    total = 0
    for r in leave_requests:
        if r.employee_id != employee_id or r.status != LeaveStatus.APPROVED:
            continue
        clipped = clip_range(r.start_date, r.end_date, period_start, period_end)
        if clipped:
            total += count_leave_days(clipped[0], clipped[1], rules, calendar)
    return total


def aggregate(
    employee_id: int,
    period_start: date,
    period_end: date,
    entries: Iterable[TimeEntry],
    leave_requests: Iterable[LeaveRequest],
    *,
    rules: EngineRules,
    calendar: Optional[WorkingCalendar] = None,
    calculator: Optional[WorkedTimeCalculator] = None,
) -> PeriodSummary:
    calendar_days = inclusive_day_count(period_start, period_end)
    working_calendar = calendar or StaticHolidayCalendar()
    calculator = calculator or StandardWorkedTimeCalculator()

    selected = _in_period(entries, employee_id, period_start, period_end)
    total_minutes = sum(calculator.worked_minutes(e) for e in selected)

    working_days = count_working_days(working_calendar, period_start, period_end)
    expected_minutes = working_days * rules.standard_daily_minutes
    overtime_minutes = max(0, total_minutes - expected_minutes)

    return PeriodSummary(
        employee_id=int(employee_id),
        period_start=period_start,
        period_end=period_end,
        calendar_days=calendar_days,
        working_days=working_days,
        total_worked_minutes=total_minutes,
        total_worked_hours=minutes_to_hours(total_minutes),
        expected_hours=minutes_to_hours(expected_minutes),
        overtime_hours=minutes_to_hours(overtime_minutes),
        # Caller's calendar unchanged, so these match the days charged on approval.
        leave_days=approved_leave_days(leave_requests, employee_id, period_start, period_end, rules, calendar),
        projects=_project_shares(selected, total_minutes, calculator),
    )


def weekly_subtotals(
    entries: Iterable[TimeEntry],
    employee_id: int,
    period_start: date,
    period_end: date,
    *,
    calculator: Optional[WorkedTimeCalculator] = None,
) -> list[WeeklySubtotal]:
    """Worked time per ISO week (Monday to Sunday) touching the period.

    Only entries dated inside the period are counted, so the first and last
    weeks may be partial.
    """

    calculator = calculator or StandardWorkedTimeCalculator()
    per_week: dict[date, int] = defaultdict(int)
    for e in _in_period(entries, employee_id, period_start, period_end):
        per_week[week_bounds(e.work_date)[0]] += calculator.worked_minutes(e)

    out = []
    monday = week_bounds(period_start)[0]
    while monday <= period_end:
        _, sunday = week_bounds(monday)
        minutes = per_week.get(monday, 0)
        out.append(
            WeeklySubtotal(
                week_start=monday,
                week_end=sunday,
                worked_minutes=minutes,
                worked_hours=minutes_to_hours(minutes),
            )
        )
        monday = sunday + timedelta(days=1)
    return out


def weekly_worked_minutes(
    entries: Iterable[TimeEntry],
    employee_id: int,
    day: date,
    *,
    exclude_id: Optional[int] = None,
    calculator: Optional[WorkedTimeCalculator] = None,
) -> int:
    """Worked minutes in the ISO week containing ``day``, optionally without one entry."""

    calculator = calculator or StandardWorkedTimeCalculator()
    monday, sunday = week_bounds(day)
    return sum(
        calculator.worked_minutes(e)
        for e in _in_period(entries, employee_id, monday, sunday)
        if exclude_id is None or e.entry_id != exclude_id
    )
