from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

from time_leave_system.aggregation.calculator.standard_calculator import StandardWorkedTimeCalculator
from time_leave_system.aggregation.engine import aggregate, month_period, weekly_subtotals, weekly_worked_minutes
from time_leave_system.common.calendar import StaticHolidayCalendar
from time_leave_system.core.enums import LeaveDayCounting, LeaveStatus
from time_leave_system.leave.lifecycle import plan_approval
from time_leave_system.leave.model import LeaveRequest
from time_leave_system.time_entries.model import TimeEntry

from tests.fakes import EMPLOYEE_ID, berlin

CREATED = datetime(2025, 1, 1, tzinfo=timezone.utc)


def entry(entry_id, day, start_h, end_h, break_minutes=0, project="INTERNAL", employee_id=EMPLOYEE_ID, month=5):
    return TimeEntry(
        entry_id=entry_id,
        employee_id=employee_id,
        work_date=date(2025, month, day),
        start=berlin(2025, month, day, start_h, 0),
        end=berlin(2025, month, day, end_h, 0),
        break_minutes=break_minutes,
        project=project,
    )


def leave(request_id, start, end, status=LeaveStatus.APPROVED):
    return LeaveRequest(
        request_id=request_id,
        employee_id=EMPLOYEE_ID,
        start_date=start,
        end_date=end,
        leave_type="VACATION",
        status=status,
        created_at=CREATED,
    )


ENTRIES = [
    entry(1, 5, 8, 17, 30, "ACME"),
    entry(2, 6, 9, 13, 0, "INTERNAL"),
    entry(3, 20, 8, 16, 30, "ACME"),
    entry(4, 30, 9, 18, 45, "BETA"),
    entry(5, 6, 9, 13, 0, "ACME", employee_id=99),
]


def test_calculator_subtracts_break_and_never_goes_negative():
    calc = StandardWorkedTimeCalculator()
    assert calc.worked_minutes(ENTRIES[0]) == 510
    assert calc.worked_minutes(replace(ENTRIES[1], break_minutes=600)) == 0


def test_monthly_summary(rules):
    start, end = month_period(2025, 5)
    calendar = StaticHolidayCalendar.from_iso_dates(["2025-05-01", "2025-05-29"])
    summary = aggregate(EMPLOYEE_ID, start, end, ENTRIES, [], rules=rules, calendar=calendar)

    assert summary.calendar_days == 31
    assert summary.working_days == 20
    assert summary.total_worked_minutes == 510 + 240 + 450 + 495
    assert summary.total_worked_hours == Decimal("28.25")
    assert summary.expected_hours == Decimal("160.00")
    assert summary.overtime_hours == Decimal("0.00")
    assert [p.project for p in summary.projects] == ["ACME", "BETA", "INTERNAL"]
    assert sum(p.worked_minutes for p in summary.projects) == summary.total_worked_minutes
    assert summary.projects[0].share_percent == Decimal("56.64")


def test_overtime_over_short_period(rules):
    summary = aggregate(EMPLOYEE_ID, date(2025, 5, 5), date(2025, 5, 5), ENTRIES, [], rules=rules)
    assert summary.working_days == 1
    assert summary.overtime_hours == Decimal("0.50")


def test_aggregation_is_additive(rules):
    whole = aggregate(EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 31), ENTRIES, [], rules=rules)
    first = aggregate(EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 15), ENTRIES, [], rules=rules)
    second = aggregate(EMPLOYEE_ID, date(2025, 5, 16), date(2025, 5, 31), ENTRIES, [], rules=rules)
    assert first.total_worked_minutes + second.total_worked_minutes == whole.total_worked_minutes


def test_aggregation_is_order_independent(rules):
    a = aggregate(EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 31), ENTRIES, [], rules=rules)
    b = aggregate(EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 31), list(reversed(ENTRIES)), [], rules=rules)
    assert a == b


def test_leave_days_clip_to_period_and_ignore_unapproved(rules):
    requests = [
        leave(1, date(2025, 4, 28), date(2025, 5, 2)),
        leave(2, date(2025, 5, 26), date(2025, 5, 27)),
        leave(3, date(2025, 5, 12), date(2025, 5, 14), status=LeaveStatus.PENDING),
        leave(4, date(2025, 5, 19), date(2025, 5, 19), status=LeaveStatus.CANCELLED),
    ]
    summary = aggregate(EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 31), [], requests, rules=rules)
    assert summary.leave_days == 2 + 2

    working = replace(rules, leave_day_counting=LeaveDayCounting.WORKING)
    calendar = StaticHolidayCalendar.from_iso_dates(["2025-05-01"])
    summary = aggregate(EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 31), [], requests, rules=working, calendar=calendar)
    assert summary.leave_days == 1 + 2


def test_weekly_subtotals_cover_each_iso_week():
    weeks = weekly_subtotals(ENTRIES, EMPLOYEE_ID, date(2025, 5, 1), date(2025, 5, 31))
    assert weeks[0].week_start == date(2025, 4, 28)
    assert weeks[-1].week_end == date(2025, 6, 1)
    assert len(weeks) == 5
    assert weeks[1].worked_minutes == 510 + 240
    assert sum(w.worked_minutes for w in weeks) == 510 + 240 + 450 + 495


def test_weekly_worked_minutes_can_exclude_an_entry():
    assert weekly_worked_minutes(ENTRIES, EMPLOYEE_ID, date(2025, 5, 7)) == 750
    assert weekly_worked_minutes(ENTRIES, EMPLOYEE_ID, date(2025, 5, 7), exclude_id=2) == 510


def test_reported_leave_days_match_days_charged(employee, manager, rules):
    working = replace(rules, leave_day_counting=LeaveDayCounting.WORKING)
    # Monday 2 June .. Sunday 8 June, weekend included.
    request = leave(1, date(2025, 6, 2), date(2025, 6, 8), status=LeaveStatus.PENDING)

    charged = []
    for calendar in (None, StaticHolidayCalendar.from_iso_dates(["2025-06-05"])):
        approved = plan_approval(request, employee, manager, working, decided_at=CREATED, calendar=calendar).request
        summary = aggregate(
            EMPLOYEE_ID, date(2025, 6, 1), date(2025, 6, 30), [], [approved], rules=working, calendar=calendar
        )
        assert summary.leave_days == approved.days_charged
        charged.append(approved.days_charged)

    assert charged == [7, 4]
