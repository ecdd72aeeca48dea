from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, InvalidInputError, NotFoundError
from ..core.rules import EngineRules
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage the employee directory (admin)."""

    def __init__(self, employees: EmployeeRepository, *, rules: EngineRules):
        self._employees = employees
        self._rules = rules

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee does not exist", entity="employee", entity_id=int(employee_id))
        return employee

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        return self._employees.list_all(include_inactive=include_inactive)

    def _require_admin(self, actor: Employee) -> None:
        if not actor.is_admin or not actor.is_active:
            raise AuthorizationError("Only administrators may manage employees", actor_id=actor.employee_id)

    def _check_reference(self, ref_id: Optional[int], field_name: str, employee_id: Optional[int]) -> Optional[int]:
        if ref_id is None:
            return None
        ref_id = int(ref_id)
        if employee_id is not None and ref_id == int(employee_id):
            raise InvalidInputError(f"An employee cannot be their own {field_name}", field=field_name)
        ref = self._employees.get_by_id(ref_id)
        if not ref or not ref.is_active:
            raise InvalidInputError(f"{field_name} does not exist", field=field_name, employee_id=ref_id)
        return ref_id

    def _check_balance(self, balance: int, cap: int) -> int:
        balance = int(balance)
        if balance < self._rules.min_leave_balance or balance > cap:
            raise InvalidInputError(
                "Leave balance out of bounds",
                balance=balance,
                min_leave_balance=self._rules.min_leave_balance,
                accrual_cap=cap,
            )
        return balance

    def _check_cap(self, accrual_cap: Optional[int]) -> Optional[int]:
        if accrual_cap is None:
            return None
        accrual_cap = int(accrual_cap)
        if accrual_cap < self._rules.min_leave_balance:
            raise InvalidInputError("accrual_cap is below the minimum balance", accrual_cap=accrual_cap)
        return accrual_cap

    def create(self, *, actor: Employee, data: NewEmployee) -> int:
        self._require_admin(actor)

        name = require_non_empty(data.name, "name")
        email = require_email(data.email)
        department = require_non_empty(data.department, "department")

        if self._employees.get_by_email(email):
            raise InvalidInputError("email is already in use", field="email")

        manager_id = self._check_reference(data.manager_id, "manager", None)
        substitute_id = self._check_reference(data.substitute_id, "substitute", None)
        accrual_cap = self._check_cap(data.accrual_cap)
        cap = accrual_cap if accrual_cap is not None else self._rules.max_leave_balance

        balance = data.annual_leave_balance
        if balance is None:
            balance = min(self._rules.annual_leave_default_balance, cap)
        balance = self._check_balance(balance, cap)

        employee_id = self._employees.create(
            name=name,
            email=email,
            department=department,
            manager_id=manager_id,
            substitute_id=substitute_id,
            annual_leave_balance=balance,
            accrual_cap=accrual_cap,
            role=Role(data.role),
        )
        logger.info("Employee %s created by %s", employee_id, actor.employee_id)
        return employee_id

    def update_profile(
        self,
        *,
        actor: Employee,
        employee_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        department: Optional[str] = None,
        manager_id: Optional[int] = None,
        substitute_id: Optional[int] = None,
        accrual_cap: Optional[int] = None,
        role: Optional[Role] = None,
        clear_manager: bool = False,
        clear_substitute: bool = False,
    ) -> Employee:
        self._require_admin(actor)
        current = self.get(employee_id)

        new_email = require_email(email) if email is not None else current.email
        if new_email != current.email:
            other = self._employees.get_by_email(new_email)
            if other and other.employee_id != current.employee_id:
                raise InvalidInputError("email is already in use", field="email")

        new_manager = None if clear_manager else (manager_id if manager_id is not None else current.manager_id)
        new_substitute = (
            None if clear_substitute else (substitute_id if substitute_id is not None else current.substitute_id)
        )
        new_cap = self._check_cap(accrual_cap) if accrual_cap is not None else current.accrual_cap
        self._check_balance(
            current.annual_leave_balance,
            new_cap if new_cap is not None else self._rules.max_leave_balance,
        )

        ok = self._employees.update_profile(
            employee_id=current.employee_id,
            name=require_non_empty(name, "name") if name is not None else current.name,
            email=new_email,
            department=optional_text(department) or current.department,
            manager_id=self._check_reference(new_manager, "manager", current.employee_id),
            substitute_id=self._check_reference(new_substitute, "substitute", current.employee_id),
            accrual_cap=new_cap,
            role=Role(role) if role is not None else current.role,
        )
        if not ok:
            raise NotFoundError("Employee does not exist", entity="employee", entity_id=current.employee_id)
        return self.get(current.employee_id)

    def disable(self, *, actor: Employee, employee_id: int) -> None:
        self._require_admin(actor)
        employee = self.get(employee_id)
        if employee.employee_id == actor.employee_id:
            raise InvalidInputError("Administrators cannot disable themselves")
        self._employees.set_active(employee.employee_id, False)
        logger.info("Employee %s disabled by %s", employee.employee_id, actor.employee_id)

    def adjust_balance(self, *, actor: Employee, employee_id: int, balance: int) -> Employee:
        """Set the leave balance directly (yearly accrual, corrections)."""

        self._require_admin(actor)
        employee = self.get(employee_id)
        balance = self._check_balance(balance, employee.balance_cap(self._rules.max_leave_balance))
        self._employees.set_balance(employee.employee_id, balance)
        logger.info(
            "Leave balance of employee %s set %s -> %s by %s",
            employee.employee_id,
            employee.annual_leave_balance,
            balance,
            actor.employee_id,
        )
        return self.get(employee.employee_id)
