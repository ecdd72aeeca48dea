from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.calendar import WorkingCalendar
from ..common.datetime_utils import now_utc
from ..common.locks import EmployeeLocks
from ..core.enums import LeaveStatus
from ..core.exceptions import AuthorizationError, DomainError, InvalidTransitionError, NotFoundError
from ..core.rules import EngineRules
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import NotificationDispatcher, NotificationPayload, dispatch_safely
from ..notifications.events import NotificationEvent
from .lifecycle import LeaveTransition, plan_approval, plan_cancellation, plan_creation, plan_rejection
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Use case: submit leave requests and drive them through their lifecycle."""

    def __init__(
        self,
        requests: LeaveRepository,
        employees: EmployeeRepository,
        *,
        rules: EngineRules,
        dispatcher: NotificationDispatcher,
        calendar: Optional[WorkingCalendar] = None,
        locks: Optional[EmployeeLocks] = None,
    ):
        self._requests = requests
        self._employees = employees
        self._rules = rules
        self._dispatcher = dispatcher
        self._calendar = calendar
        self._locks = locks or EmployeeLocks()

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee does not exist", entity="employee", entity_id=int(employee_id))
        return employee

    def _optional_employee(self, employee_id: Optional[int]) -> Optional[Employee]:
        if employee_id is None:
            return None
        return self._employees.get_by_id(int(employee_id))

    def get(self, request_id: int) -> LeaveRequest:
        request = self._requests.get_by_id(int(request_id))
        if not request:
            raise NotFoundError("Leave request does not exist", entity="leave_request", entity_id=int(request_id))
        return request

    def _notify(self, event: NotificationEvent, request: LeaveRequest, actor: Employee) -> None:
        employee = self._employees.get_by_id(request.employee_id)
        if not employee:
            return
        dispatch_safely(
            self._dispatcher,
            event,
            NotificationPayload(
                subject=request,
                employee=employee,
                manager=self._optional_employee(employee.manager_id),
                substitute=self._optional_employee(request.substitute_id),
                actor_id=actor.employee_id,
                reason=request.decision_reason,
            ),
        )

    def submit(self, *, actor: Employee, data: NewLeaveRequest) -> LeaveRequest:
        employee = self._employee(data.employee_id)
        if actor.employee_id != employee.employee_id and not actor.can_decide_for(employee):
            raise AuthorizationError(
                "Not allowed to request leave for this employee",
                actor_id=actor.employee_id,
                employee_id=employee.employee_id,
            )

        try:
            request = plan_creation(
                data,
                employee,
                self._rules,
                substitute=self._optional_employee(data.substitute_id),
                created_at=now_utc(),
            )
        except DomainError as e:
            logger.info("Leave request for employee %s rejected (%s): %s", employee.employee_id, e.rule, e.message)
            raise

        request_id = self._requests.create(request)
        saved = self.get(request_id)
        logger.info(
            "Leave request %s created for employee %s (%s, %s..%s)",
            request_id,
            employee.employee_id,
            saved.leave_type,
            saved.start_date,
            saved.end_date,
        )
        self._notify(NotificationEvent.LEAVE_REQUEST_CREATED, saved, actor)
        return saved

    def _apply(self, transition: LeaveTransition, actor: Employee) -> LeaveRequest:
        request = transition.request
        ok = self._requests.apply_transition(
            request_id=int(request.request_id),
            expected_status=transition.previous_status,
            new_status=request.status,
            days_charged=request.days_charged,
            decided_by=request.decided_by,
            decided_at=request.decided_at,
            decision_reason=request.decision_reason,
            employee_id=request.employee_id,
            balance_delta=transition.balance_delta,
            min_balance=self._rules.min_leave_balance,
        )
        if not ok:
            raise InvalidTransitionError(
                "Leave request was changed concurrently",
                request_id=request.request_id,
                expected_status=transition.previous_status.value,
            )

        logger.info(
            "Leave request %s %s -> %s by %s (balance %+d -> %s)",
            request.request_id,
            transition.previous_status.value,
            request.status.value,
            actor.employee_id,
            transition.balance_delta,
            transition.balance_after,
        )
        saved = self.get(int(request.request_id))
        self._notify(transition.event, saved, actor)
        return saved

    def _decide(self, request_id: int, actor: Employee, plan) -> LeaveRequest:
        request = self.get(request_id)
        with self._locks.hold(request.employee_id):
            # Re-read under the lock: status and balance may have moved.
            request = self.get(request_id)
            employee = self._employee(request.employee_id)
            try:
                transition = plan(request, employee)
            except DomainError as e:
                logger.info("Leave request %s decision rejected (%s): %s", request_id, e.rule, e.message)
                raise
            return self._apply(transition, actor)

    def approve(self, *, actor: Employee, request_id: int) -> LeaveRequest:
        return self._decide(
            request_id,
            actor,
            lambda request, employee: plan_approval(
                request,
                employee,
                actor,
                self._rules,
                decided_at=now_utc(),
                calendar=self._calendar,
            ),
        )

    def reject(self, *, actor: Employee, request_id: int, reason: Optional[str] = "") -> LeaveRequest:
        return self._decide(
            request_id,
            actor,
            lambda request, employee: plan_rejection(
                request,
                employee,
                actor,
                reason=reason,
                decided_at=now_utc(),
            ),
        )

    def cancel(self, *, actor: Employee, request_id: int, reason: Optional[str] = None) -> LeaveRequest:
        return self._decide(
            request_id,
            actor,
            lambda request, employee: plan_cancellation(
                request,
                employee,
                actor,
                self._rules,
                decided_at=now_utc(),
                reason=reason,
            ),
        )

    def list_for_employee(
        self,
        *,
        actor: Employee,
        employee_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        employee = self._employee(employee_id)
        if actor.employee_id != employee.employee_id and not actor.can_decide_for(employee):
            raise AuthorizationError(
                "Not allowed to view leave requests of this employee",
                actor_id=actor.employee_id,
                employee_id=employee.employee_id,
            )
        return self._requests.list_for_employee(employee.employee_id, start=start, end=end, status=status)

    def list_pending_for(self, *, actor: Employee) -> list[LeaveRequest]:
        """Pending requests the actor may decide on."""

        out = []
        for request in self._requests.list_by_status(LeaveStatus.PENDING):
            employee = self._employees.get_by_id(request.employee_id)
            if employee and actor.can_decide_for(employee):
                out.append(request)
        return out
