from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from time_leave_system.aggregation.export import entries_frame, export_entries
from time_leave_system.core.exceptions import AuthorizationError, InvalidInputError
from time_leave_system.leave.model import NewLeaveRequest
from time_leave_system.time_entries.model import TimeEntryCandidate

from tests.fakes import EMPLOYEE_ID, berlin


def record(container, actor, day, start_h, end_h, **kwargs):
    return container.time_entry_service.submit(
        actor=actor,
        candidate=TimeEntryCandidate(
            employee_id=EMPLOYEE_ID,
            work_date=date(2025, 6, day),
            start=berlin(2025, 6, day, start_h, 0),
            end=berlin(2025, 6, day, end_h, 0),
            **kwargs,
        ),
    )


def test_summary_combines_entries_and_approved_leave(container, employee, manager):
    record(container, employee, 2, 8, 12, project="ACME")
    record(container, employee, 3, 8, 12)
    request = container.leave_service.submit(
        actor=employee,
        data=NewLeaveRequest(EMPLOYEE_ID, date(2025, 6, 10), date(2025, 6, 12), "VACATION"),
    )
    container.leave_service.approve(actor=manager, request_id=request.request_id)

    summary = container.report_service.monthly_summary(actor=manager, employee_id=EMPLOYEE_ID, year=2025, month=6)

    assert summary.total_worked_hours == Decimal("8.00")
    assert summary.leave_days == 3
    assert summary.working_days == 21
    assert summary.to_dict()["projects"] == [
        {"project": "ACME", "worked_hours": "4.00", "share_percent": "50.00"},
        {"project": "INTERNAL", "worked_hours": "4.00", "share_percent": "50.00"},
    ]


def test_reports_are_private(container, other):
    with pytest.raises(AuthorizationError):
        container.report_service.summary(
            actor=other, employee_id=EMPLOYEE_ID, start=date(2025, 6, 1), end=date(2025, 6, 30)
        )


def test_inverted_period_is_rejected(container, employee):
    with pytest.raises(InvalidInputError):
        container.report_service.summary(
            actor=employee, employee_id=EMPLOYEE_ID, start=date(2025, 6, 30), end=date(2025, 6, 1)
        )


def test_export_frame_and_formats(container, employee, rules):
    record(container, employee, 3, 8, 12, notes="standup")
    record(container, employee, 2, 9, 16, break_minutes=30)
    owner, entries = container.report_service.entries_for_export(
        actor=employee, employee_id=EMPLOYEE_ID, start=date(2025, 6, 1), end=date(2025, 6, 30)
    )

    df = entries_frame(owner, entries, tz_name=rules.timezone)
    assert list(df["Date"]) == ["2025-06-02", "2025-06-03"]
    assert list(df["Start"]) == ["09:00", "08:00"]
    assert list(df["Worked hours"]) == [6.5, 4.0]

    csv = export_entries(df, "csv").getvalue().decode("utf-8")
    assert csv.splitlines()[0].startswith("Date,Employee,Start,End")

    xlsx = export_entries(df, "xlsx")
    assert pd.read_excel(xlsx, engine="openpyxl")["Project"].tolist() == ["INTERNAL", "INTERNAL"]

    with pytest.raises(InvalidInputError):
        export_entries(df, "pdf")
