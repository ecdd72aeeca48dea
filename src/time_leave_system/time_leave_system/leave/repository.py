from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(self, request: LeaveRequest) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        """Requests of one employee, optionally only those touching [start, end]."""

        raise NotImplementedError

    def list_by_status(self, status: LeaveStatus) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def apply_transition(
        self,
        *,
        request_id: int,
        expected_status: LeaveStatus,
        new_status: LeaveStatus,
        days_charged: int,
        decided_by: Optional[int],
        decided_at: Optional[datetime],
        decision_reason: Optional[str],
        employee_id: int,
        balance_delta: int,
        min_balance: int = 0,
    ) -> bool:
        """Write status and balance change atomically.

        The status is only changed while it still equals ``expected_status``;
        returns False (and changes nothing) when another writer got there first.
        A debit that would leave the balance below ``min_balance`` raises
        InsufficientBalanceError and changes nothing.
        """

        raise NotImplementedError
