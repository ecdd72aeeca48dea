from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import constants
from .enums import LeaveDayCounting, RoundingMethod
from .exceptions import InvalidInputError

# camelCase keys accepted alongside the snake_case field names.
_CAMEL_CASE_KEYS = {
    "maxDailyHours": "max_daily_hours",
    "maxWeeklyHours": "max_weekly_hours",
    "workingHoursPerDay": "standard_daily_hours",
    "standardDailyHours": "standard_daily_hours",
    "breakDurationMinutes": "break_duration_minutes",
    "minimumBreakThresholdHours": "minimum_break_threshold_hours",
    "automaticBreakDeduction": "automatic_break_deduction",
    "roundingMinutes": "rounding_minutes",
    "roundingMethod": "rounding_method",
    "defaultProjectCode": "default_project_code",
    "annualLeaveDefaultBalance": "annual_leave_default_balance",
    "minLeaveBalance": "min_leave_balance",
    "maxLeaveBalance": "max_leave_balance",
    "timezone": "timezone",
    "leaveTypes": "leave_types",
    "leaveDayCounting": "leave_day_counting",
}

_INT_OPTIONS = (
    "break_duration_minutes",
    "rounding_minutes",
    "annual_leave_default_balance",
    "min_leave_balance",
    "max_leave_balance",
)
_HOUR_OPTIONS = ("max_daily_hours", "max_weekly_hours", "standard_daily_hours", "minimum_break_threshold_hours")


@dataclass(frozen=True)
class EngineRules:
    """Work-time and leave rules, passed explicitly into every engine call."""

    max_daily_hours: float = constants.DEFAULT_MAX_DAILY_HOURS
    max_weekly_hours: float = constants.DEFAULT_MAX_WEEKLY_HOURS
    standard_daily_hours: float = constants.DEFAULT_STANDARD_DAILY_HOURS
    break_duration_minutes: int = constants.DEFAULT_BREAK_DURATION_MINUTES
    minimum_break_threshold_hours: float = constants.DEFAULT_MINIMUM_BREAK_THRESHOLD_HOURS
    automatic_break_deduction: bool = True
    rounding_minutes: int = constants.DEFAULT_ROUNDING_MINUTES
    rounding_method: RoundingMethod = RoundingMethod.NEAREST
    default_project_code: str = constants.DEFAULT_PROJECT_CODE
    annual_leave_default_balance: int = constants.DEFAULT_ANNUAL_LEAVE_BALANCE
    min_leave_balance: int = constants.DEFAULT_MIN_LEAVE_BALANCE
    max_leave_balance: int = constants.DEFAULT_MAX_LEAVE_BALANCE
    timezone: str = constants.DEFAULT_TIMEZONE
    leave_types: tuple[str, ...] = constants.DEFAULT_LEAVE_TYPES
    leave_day_counting: LeaveDayCounting = LeaveDayCounting.CALENDAR

    def __post_init__(self) -> None:
        if self.max_daily_hours <= 0 or self.max_weekly_hours <= 0:
            raise InvalidInputError("Work-time ceilings must be positive")
        if self.standard_daily_hours < 0:
            raise InvalidInputError("standard_daily_hours must not be negative")
        if self.break_duration_minutes < 0:
            raise InvalidInputError("break_duration_minutes must not be negative")
        if self.minimum_break_threshold_hours < 0:
            raise InvalidInputError("minimum_break_threshold_hours must not be negative")
        if self.rounding_minutes < 0 or (self.rounding_minutes and (24 * 60) % self.rounding_minutes):
            raise InvalidInputError(
                "rounding_minutes must be 0 or divide a day evenly",
                rounding_minutes=self.rounding_minutes,
            )
        if not self.default_project_code.strip():
            raise InvalidInputError("default_project_code must not be empty")
        if not self.min_leave_balance <= self.annual_leave_default_balance <= self.max_leave_balance:
            raise InvalidInputError(
                "annual_leave_default_balance must lie within the leave balance bounds",
                min_leave_balance=self.min_leave_balance,
                max_leave_balance=self.max_leave_balance,
            )
        if not self.leave_types:
            raise InvalidInputError("At least one leave type must be configured")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise InvalidInputError("Unknown timezone", timezone=self.timezone)

    @property
    def max_daily_minutes(self) -> int:
        return round(self.max_daily_hours * constants.MINUTES_PER_HOUR)

    @property
    def max_weekly_minutes(self) -> int:
        return round(self.max_weekly_hours * constants.MINUTES_PER_HOUR)

    @property
    def standard_daily_minutes(self) -> int:
        return round(self.standard_daily_hours * constants.MINUTES_PER_HOUR)

    @property
    def break_threshold_minutes(self) -> int:
        return round(self.minimum_break_threshold_hours * constants.MINUTES_PER_HOUR)

    def accepts_leave_type(self, leave_type: str) -> bool:
        return leave_type in self.leave_types

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "EngineRules":
        """Build rules from a settings mapping (camelCase or snake_case keys)."""

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in (values or {}).items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                raise InvalidInputError("Unknown rule option", option=key)
            kwargs[name] = value

        try:
            if "rounding_method" in kwargs:
                kwargs["rounding_method"] = RoundingMethod(str(kwargs["rounding_method"]).lower())
            if "leave_day_counting" in kwargs:
                kwargs["leave_day_counting"] = LeaveDayCounting(str(kwargs["leave_day_counting"]).lower())
        except ValueError as e:
            raise InvalidInputError(str(e))

        if "leave_types" in kwargs:
            raw = kwargs["leave_types"]
            if isinstance(raw, str):
                raw = raw.split(",")
            kwargs["leave_types"] = tuple(str(t).strip().upper() for t in raw if str(t).strip())
        if "automatic_break_deduction" in kwargs and isinstance(kwargs["automatic_break_deduction"], str):
            kwargs["automatic_break_deduction"] = kwargs["automatic_break_deduction"].strip().lower() in {
                "1",
                "true",
                "yes",
                "on",
            }
        try:
            for name in _INT_OPTIONS:
                if name in kwargs:
                    kwargs[name] = int(kwargs[name])
            for name in _HOUR_OPTIONS:
                if name in kwargs:
                    kwargs[name] = float(kwargs[name])
        except (TypeError, ValueError):
            raise InvalidInputError("Rule options must be numeric", option=name)

        return cls(**kwargs)
