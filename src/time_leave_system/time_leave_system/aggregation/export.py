"""Time entry export to CSV/XLSX, written in memory."""

from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from ..common.datetime_utils import format_iso_date, format_local, minutes_to_hours
from ..core.exceptions import InvalidInputError
from ..employees.model import Employee
from ..time_entries.model import TimeEntry
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator

EXPORT_COLUMNS = ["Date", "Employee", "Start", "End", "Break (min)", "Worked hours", "Project", "Notes"]

MIMETYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def entries_frame(
    employee: Employee,
    entries: Iterable[TimeEntry],
    *,
    tz_name: str,
    calculator: WorkedTimeCalculator | None = None,
) -> pd.DataFrame:
    calculator = calculator or StandardWorkedTimeCalculator()
    rows = [
        {
            "Date": format_iso_date(e.work_date),
            "Employee": employee.name,
            "Start": format_local(e.start, tz_name),
            "End": format_local(e.end, tz_name),
            "Break (min)": e.break_minutes,
            "Worked hours": float(minutes_to_hours(calculator.worked_minutes(e))),
            "Project": e.project,
            "Notes": e.notes or "",
        }
        for e in sorted(entries, key=lambda x: (x.work_date, x.start))
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_entries(df: pd.DataFrame, fmt: str) -> io.BytesIO:
    fmt = (fmt or "csv").strip().lower()
    out = io.BytesIO()
    if fmt == "csv":
        out.write(df.to_csv(index=False).encode("utf-8"))
    elif fmt == "xlsx":
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="TimeEntries")
    else:
        raise InvalidInputError("Unsupported export format", format=fmt, allowed=sorted(MIMETYPES))
    out.seek(0)
    return out
