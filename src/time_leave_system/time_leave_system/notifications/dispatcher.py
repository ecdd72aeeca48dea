"""Notification hooks fired after a successful state change.

Delivery (e-mail templates, chat webhooks) lives behind the
``NotificationDispatcher`` interface. Dispatch is best-effort: a failing
dispatcher is logged and never undoes the change that triggered it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from ..employees.model import Employee
from .events import NotificationEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationPayload:
    subject: Any
    employee: Employee
    manager: Optional[Employee] = None
    substitute: Optional[Employee] = None
    actor_id: Optional[int] = None
    reason: Optional[str] = None


class NotificationDispatcher(Protocol):
    def dispatch(self, event: NotificationEvent, payload: NotificationPayload) -> None:
        raise NotImplementedError


class LoggingNotificationDispatcher:
    """Writes one log line per event. Used when no delivery channel is configured."""

    def dispatch(self, event: NotificationEvent, payload: NotificationPayload) -> None:
        recipients = [payload.employee.email]
        if payload.manager:
            recipients.append(payload.manager.email)
        if payload.substitute:
            recipients.append(payload.substitute.email)
        logger.info(
            "Notification %s for employee %s (actor=%s, recipients=%s, reason=%r)",
            event.value,
            payload.employee.employee_id,
            payload.actor_id,
            ",".join(recipients),
            payload.reason,
        )


def dispatch_safely(
    dispatcher: NotificationDispatcher,
    event: NotificationEvent,
    payload: NotificationPayload,
) -> bool:
    """Deliver ``event``; returns False instead of raising when delivery fails."""

    try:
        dispatcher.dispatch(event, payload)
    except Exception:
        logger.warning(
            "Notification %s for employee %s failed",
            event.value,
            payload.employee.employee_id,
            exc_info=True,
        )
        return False
    return True
