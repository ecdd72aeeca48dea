from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import RoundingMethod
from ...core.exceptions import InvalidInputError
from .base import RoundingStrategy
from .down_strategy import DownRoundingStrategy
from .nearest_strategy import NearestRoundingStrategy
from .up_strategy import UpRoundingStrategy


@dataclass
class RoundingStrategyFactory:
    """Factory Pattern: choose the rounding strategy configured in the rules."""

    def for_method(self, method: RoundingMethod | str) -> RoundingStrategy:
        try:
            method = RoundingMethod(method)
        except ValueError:
            raise InvalidInputError("Unknown rounding method", rounding_method=str(method))

        if method == RoundingMethod.UP:
            return UpRoundingStrategy()
        if method == RoundingMethod.DOWN:
            return DownRoundingStrategy()
        return NearestRoundingStrategy()
