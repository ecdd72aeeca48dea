from __future__ import annotations

from enum import Enum


class NotificationEvent(str, Enum):
    TIME_ENTRY_CREATED = "timeEntryCreated"
    TIME_ENTRY_UPDATED = "timeEntryUpdated"
    TIME_ENTRY_DELETED = "timeEntryDeleted"
    TIME_ENTRY_APPROVED = "timeEntryApproved"
    LEAVE_REQUEST_CREATED = "leaveRequestCreated"
    LEAVE_REQUEST_APPROVED = "leaveRequestApproved"
    LEAVE_REQUEST_DENIED = "leaveRequestDenied"
    LEAVE_REQUEST_CANCELLED = "leaveRequestCancelled"
