import pytest

from time_leave_system.core.enums import LeaveDayCounting, RoundingMethod
from time_leave_system.core.exceptions import InvalidInputError
from time_leave_system.core.rules import EngineRules


def test_defaults():
    rules = EngineRules()
    assert rules.max_daily_minutes == 480
    assert rules.max_weekly_minutes == 2400
    assert rules.break_duration_minutes == 30
    assert rules.break_threshold_minutes == 360
    assert rules.automatic_break_deduction is True
    assert rules.rounding_minutes == 15
    assert rules.rounding_method == RoundingMethod.NEAREST
    assert rules.default_project_code == "INTERNAL"
    assert rules.annual_leave_default_balance == 30


def test_from_mapping_accepts_camel_case_settings():
    rules = EngineRules.from_mapping(
        {
            "maxDailyHours": "10",
            "roundingMethod": "UP",
            "automaticBreakDeduction": "false",
            "workingHoursPerDay": 7.5,
            "leaveTypes": "vacation, sick",
            "leave_day_counting": "working",
        }
    )
    assert rules.max_daily_hours == 10.0
    assert rules.rounding_method == RoundingMethod.UP
    assert rules.automatic_break_deduction is False
    assert rules.standard_daily_minutes == 450
    assert rules.leave_types == ("VACATION", "SICK")
    assert rules.leave_day_counting == LeaveDayCounting.WORKING


@pytest.mark.parametrize(
    "values",
    [
        {"unknownOption": 1},
        {"roundingMethod": "sideways"},
        {"roundingMinutes": 7},
        {"maxDailyHours": "eight"},
        {"timezone": "Mars/Olympus"},
        {"maxDailyHours": 0},
    ],
)
def test_from_mapping_rejects_invalid_values(values):
    with pytest.raises(InvalidInputError):
        EngineRules.from_mapping(values)
