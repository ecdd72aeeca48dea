from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave request and the bookkeeping of its decision.

    ``request_id`` is None until the request has been stored. ``days_charged``
    is the day count deducted at approval; cancelling an approved request
    credits exactly that amount back.
    """

    request_id: Optional[int]
    employee_id: int
    start_date: date
    end_date: date
    leave_type: str
    status: LeaveStatus
    created_at: datetime
    substitute_id: Optional[int] = None
    notes: Optional[str] = None
    days_charged: int = 0
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING


@dataclass(frozen=True)
class NewLeaveRequest:
    employee_id: int
    start_date: date
    end_date: date
    leave_type: str
    substitute_id: Optional[int] = None
    notes: Optional[str] = None
