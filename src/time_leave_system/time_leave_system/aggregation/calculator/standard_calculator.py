from __future__ import annotations

from ...common.datetime_utils import minutes_between
from ...time_entries.model import TimeEntry
from .base import WorkedTimeCalculator


class StandardWorkedTimeCalculator(WorkedTimeCalculator):
    """Standard rule: (end - start) - break_minutes, not below 0."""

    def worked_minutes(self, entry: TimeEntry) -> int:
        minutes = minutes_between(entry.start, entry.end)
        minutes -= int(entry.break_minutes or 0)
        return max(minutes, 0)
