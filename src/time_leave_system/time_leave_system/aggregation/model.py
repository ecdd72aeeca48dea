from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..common.datetime_utils import format_iso_date


@dataclass(frozen=True)
class ProjectShare:
    project: str
    worked_minutes: int
    worked_hours: Decimal
    share_percent: Decimal


@dataclass(frozen=True)
class WeeklySubtotal:
    week_start: date
    week_end: date
    worked_minutes: int
    worked_hours: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    employee_id: int
    period_start: date
    period_end: date
    calendar_days: int
    working_days: int
    total_worked_minutes: int
    total_worked_hours: Decimal
    expected_hours: Decimal
    overtime_hours: Decimal
    leave_days: int
    projects: tuple[ProjectShare, ...] = ()

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "period_start": format_iso_date(self.period_start),
            "period_end": format_iso_date(self.period_end),
            "calendar_days": self.calendar_days,
            "working_days": self.working_days,
            "total_worked_minutes": self.total_worked_minutes,
            "total_worked_hours": str(self.total_worked_hours),
            "expected_hours": str(self.expected_hours),
            "overtime_hours": str(self.overtime_hours),
            "leave_days": self.leave_days,
            "projects": [
                {
                    "project": p.project,
                    "worked_hours": str(p.worked_hours),
                    "share_percent": str(p.share_percent),
                }
                for p in self.projects
            ],
        }
