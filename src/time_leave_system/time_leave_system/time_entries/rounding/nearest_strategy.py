from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import round_timestamp
from ...core.enums import RoundingMethod
from .base import RoundingStrategy


class NearestRoundingStrategy(RoundingStrategy):
    """Round to the closest grid point, halves go up."""

    def round(self, ts: datetime, step_minutes: int) -> datetime:
        return round_timestamp(ts, step_minutes, RoundingMethod.NEAREST)
