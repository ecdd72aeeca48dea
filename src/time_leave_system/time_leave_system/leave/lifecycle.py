"""Leave request state machine and balance bookkeeping.

The planners below are pure: they check authority, the transition table and
the balance, and describe the outcome as a ``LeaveTransition``. Applying it
(status and balance in one atomic store write) and notifying is the job of
``LeaveService``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.calendar import WorkingCalendar, count_working_days
from ..common.datetime_utils import format_iso_date, inclusive_day_count
from ..core.enums import LeaveDayCounting, LeaveStatus
from ..core.exceptions import (
    AuthorizationError,
    InsufficientBalanceError,
    InvalidInputError,
    InvalidTransitionError,
)
from ..core.rules import EngineRules
from ..employees.model import Employee
from ..notifications.events import NotificationEvent
from .model import LeaveRequest, NewLeaveRequest

LEAVE_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class LeaveTransition:
    request: LeaveRequest
    previous_status: LeaveStatus
    balance_delta: int
    balance_after: int
    event: NotificationEvent


def can_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    return target in LEAVE_TRANSITIONS.get(current, frozenset())


def _require_transition(request: LeaveRequest, target: LeaveStatus) -> None:
    if not can_transition(request.status, target):
        raise InvalidTransitionError(
            f"Cannot move leave request from {request.status.value} to {target.value}",
            request_id=request.request_id,
            current_status=request.status.value,
            target_status=target.value,
        )


def _require_authority(actor: Employee, employee: Employee, action: str) -> None:
    if not actor.can_decide_for(employee):
        raise AuthorizationError(
            f"Only the manager or an administrator may {action} this request",
            actor_id=actor.employee_id,
            employee_id=employee.employee_id,
        )


def _require_owner(request: LeaveRequest, employee: Employee) -> None:
    if request.employee_id != employee.employee_id:
        raise InvalidInputError("Leave request belongs to another employee", request_id=request.request_id)


def count_leave_days(
    start: date,
    end: date,
    rules: EngineRules,
    calendar: Optional[WorkingCalendar] = None,
) -> int:
    """Days charged for leave from start to end, both inclusive.

    Calendar days unless the rules ask for working days and a calendar is
    available.
    """

    days = inclusive_day_count(start, end)
    if rules.leave_day_counting == LeaveDayCounting.WORKING and calendar is not None:
        return count_working_days(calendar, start, end)
    return days


def plan_creation(
    data: NewLeaveRequest,
    employee: Employee,
    rules: EngineRules,
    *,
    substitute: Optional[Employee] = None,
    created_at: datetime,
) -> LeaveRequest:
    if not employee.is_active:
        raise InvalidInputError("Employee is disabled", employee_id=employee.employee_id)
    if data.employee_id != employee.employee_id:
        raise InvalidInputError("Leave request belongs to another employee")

    inclusive_day_count(data.start_date, data.end_date)

    leave_type = (data.leave_type or "").strip().upper()
    if not rules.accepts_leave_type(leave_type):
        raise InvalidInputError(
            "Unknown leave type",
            leave_type=data.leave_type,
            allowed=list(rules.leave_types),
        )

    if data.substitute_id is not None:
        if int(data.substitute_id) == employee.employee_id:
            raise InvalidInputError("An employee cannot be their own substitute", field="substitute")
        if substitute is None or substitute.employee_id != int(data.substitute_id) or not substitute.is_active:
            raise InvalidInputError("substitute does not exist", field="substitute", employee_id=data.substitute_id)

    return LeaveRequest(
        request_id=None,
        employee_id=employee.employee_id,
        start_date=data.start_date,
        end_date=data.end_date,
        leave_type=leave_type,
        status=LeaveStatus.PENDING,
        created_at=created_at,
        substitute_id=int(data.substitute_id) if data.substitute_id is not None else None,
        notes=(data.notes or "").strip() or None,
    )


def plan_approval(
    request: LeaveRequest,
    employee: Employee,
    actor: Employee,
    rules: EngineRules,
    *,
    decided_at: datetime,
    calendar: Optional[WorkingCalendar] = None,
) -> LeaveTransition:
    _require_owner(request, employee)
    _require_authority(actor, employee, "approve")
    _require_transition(request, LeaveStatus.APPROVED)

    days = count_leave_days(request.start_date, request.end_date, rules, calendar)
    if employee.annual_leave_balance - days < rules.min_leave_balance:
        raise InsufficientBalanceError(
            "Not enough leave balance",
            requested_days=days,
            balance=employee.annual_leave_balance,
            min_leave_balance=rules.min_leave_balance,
            start_date=format_iso_date(request.start_date),
            end_date=format_iso_date(request.end_date),
        )

    approved = replace(
        request,
        status=LeaveStatus.APPROVED,
        days_charged=days,
        decided_by=actor.employee_id,
        decided_at=decided_at,
    )
    return LeaveTransition(
        request=approved,
        previous_status=request.status,
        balance_delta=-days,
        balance_after=employee.annual_leave_balance - days,
        event=NotificationEvent.LEAVE_REQUEST_APPROVED,
    )


def plan_rejection(
    request: LeaveRequest,
    employee: Employee,
    actor: Employee,
    *,
    reason: Optional[str],
    decided_at: datetime,
) -> LeaveTransition:
    _require_owner(request, employee)
    _require_authority(actor, employee, "reject")
    _require_transition(request, LeaveStatus.REJECTED)

    rejected = replace(
        request,
        status=LeaveStatus.REJECTED,
        decided_by=actor.employee_id,
        decided_at=decided_at,
        decision_reason=(reason or "").strip(),
    )
    return LeaveTransition(
        request=rejected,
        previous_status=request.status,
        balance_delta=0,
        balance_after=employee.annual_leave_balance,
        event=NotificationEvent.LEAVE_REQUEST_DENIED,
    )


def plan_cancellation(
    request: LeaveRequest,
    employee: Employee,
    actor: Employee,
    rules: EngineRules,
    *,
    decided_at: datetime,
    reason: Optional[str] = None,
) -> LeaveTransition:
    _require_owner(request, employee)
    if actor.employee_id != employee.employee_id:
        _require_authority(actor, employee, "cancel")
    _require_transition(request, LeaveStatus.CANCELLED)

    credit = request.days_charged if request.status == LeaveStatus.APPROVED else 0
    # Restores days_charged unless that would exceed the current cap. A cap
    # lowered after approval therefore forfeits the excess days.
    cap = employee.balance_cap(rules.max_leave_balance)
    balance_after = min(employee.annual_leave_balance + credit, max(cap, employee.annual_leave_balance))

    cancelled = replace(
        request,
        status=LeaveStatus.CANCELLED,
        decided_by=actor.employee_id,
        decided_at=decided_at,
        decision_reason=(reason or "").strip() or request.decision_reason,
    )
    return LeaveTransition(
        request=cancelled,
        previous_status=request.status,
        balance_delta=balance_after - employee.annual_leave_balance,
        balance_after=balance_after,
        event=NotificationEvent.LEAVE_REQUEST_CANCELLED,
    )
