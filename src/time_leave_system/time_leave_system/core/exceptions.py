from __future__ import annotations

from typing import Any, Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations.

    Every domain error is recoverable at the call site. ``rule`` names the
    violated rule and ``details`` carries the structured data a caller needs
    to render an actionable message.
    """

    rule = "domain_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.rule, "detail": self.message, **self.details}


class InvalidInputError(DomainError):
    """Raised when input data is malformed, missing or inconsistent."""

    rule = "invalid_input"


class OverlapError(DomainError):
    """Raised when a time entry intersects an existing entry of the same day."""

    rule = "overlap"

    def __init__(self, message: str, *, conflicting_ids: Sequence[int]):
        super().__init__(message, conflicting_ids=sorted(int(i) for i in conflicting_ids))

    @property
    def conflicting_ids(self) -> list[int]:
        return self.details["conflicting_ids"]


class InsufficientBreakError(DomainError):
    rule = "insufficient_break"


class DailyLimitExceededError(DomainError):
    rule = "daily_limit_exceeded"


class WeeklyLimitExceededError(DomainError):
    rule = "weekly_limit_exceeded"


class InvalidTransitionError(DomainError):
    """Raised for a leave status change the lifecycle does not allow."""

    rule = "invalid_transition"


class InsufficientBalanceError(DomainError):
    rule = "insufficient_balance"


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""

    rule = "forbidden"


class NotFoundError(DomainError):
    rule = "not_found"

    def __init__(self, message: str, *, entity: str, entity_id: Optional[int] = None):
        super().__init__(message, entity=entity, entity_id=entity_id)
