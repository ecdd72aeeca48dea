from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class RoundingStrategy(ABC):
    """Strategy Pattern: encapsulate how entry timestamps are snapped to the grid."""

    @abstractmethod
    def round(self, ts: datetime, step_minutes: int) -> datetime:
        raise NotImplementedError
