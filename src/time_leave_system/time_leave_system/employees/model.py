from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and their leave balance."""

    employee_id: int
    name: str
    email: str
    department: str
    manager_id: Optional[int] = None
    substitute_id: Optional[int] = None
    annual_leave_balance: int = 30
    accrual_cap: Optional[int] = None
    role: Role = Role.EMPLOYEE
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def balance_cap(self, default_cap: int) -> int:
        return self.accrual_cap if self.accrual_cap is not None else int(default_cap)

    def can_decide_for(self, employee: "Employee") -> bool:
        """Approval authority: the employee's manager, or an administrator."""
        if not self.is_active:
            return False
        return self.is_admin or employee.manager_id == self.employee_id


@dataclass(frozen=True)
class NewEmployee:
    name: str
    email: str
    department: str
    manager_id: Optional[int] = None
    substitute_id: Optional[int] = None
    annual_leave_balance: Optional[int] = None
    accrual_cap: Optional[int] = None
    role: Role = Role.EMPLOYEE
