from __future__ import annotations

from abc import ABC, abstractmethod

from ...time_entries.model import TimeEntry


class WorkedTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked_minutes(self, entry: TimeEntry) -> int:
        raise NotImplementedError
