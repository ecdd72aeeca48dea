from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of an employee, used for approval authority."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class LeaveStatus(str, Enum):
    """Leave request lifecycle states. REJECTED and CANCELLED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class LeaveType(str, Enum):
    """Built-in leave types. More can be enabled through ``EngineRules.leave_types``."""

    VACATION = "VACATION"
    SICK = "SICK"
    SPECIAL = "SPECIAL"


class RoundingMethod(str, Enum):
    NEAREST = "nearest"
    UP = "up"
    DOWN = "down"


class LeaveDayCounting(str, Enum):
    """How the days of a leave request are counted against the balance."""

    CALENDAR = "calendar"
    WORKING = "working"
