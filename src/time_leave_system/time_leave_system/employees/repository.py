from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        email: str,
        department: str,
        manager_id: Optional[int],
        substitute_id: Optional[int],
        annual_leave_balance: int,
        accrual_cap: Optional[int],
        role: Role,
    ) -> int:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        employee_id: int,
        name: str,
        email: str,
        department: str,
        manager_id: Optional[int],
        substitute_id: Optional[int],
        accrual_cap: Optional[int],
        role: Role,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: int, is_active: bool) -> bool:
        """Soft-disable/enable. Employees are never hard-deleted."""

        raise NotImplementedError

    def set_balance(self, employee_id: int, balance: int) -> bool:
        """Administrative balance adjustment (accrual, correction)."""

        raise NotImplementedError
