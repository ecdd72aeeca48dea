import os

# Engine rule options that may be overridden through the environment.
_RULE_ENV_VARS = {
    "max_daily_hours": "MAX_DAILY_HOURS",
    "max_weekly_hours": "MAX_WEEKLY_HOURS",
    "standard_daily_hours": "STANDARD_DAILY_HOURS",
    "break_duration_minutes": "BREAK_DURATION_MINUTES",
    "minimum_break_threshold_hours": "MINIMUM_BREAK_THRESHOLD_HOURS",
    "automatic_break_deduction": "AUTOMATIC_BREAK_DEDUCTION",
    "rounding_minutes": "ROUNDING_MINUTES",
    "rounding_method": "ROUNDING_METHOD",
    "default_project_code": "DEFAULT_PROJECT_CODE",
    "annual_leave_default_balance": "ANNUAL_LEAVE_DEFAULT_BALANCE",
    "min_leave_balance": "MIN_LEAVE_BALANCE",
    "max_leave_balance": "MAX_LEAVE_BALANCE",
    "timezone": "TIMEZONE",
    "leave_types": "LEAVE_TYPES",
    "leave_day_counting": "LEAVE_DAY_COUNTING",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def engine_rules_from_env(**defaults) -> dict:
    """Rule options for EngineRules.from_mapping; env vars win over ``defaults``."""

    rules = dict(defaults)
    for option, var in _RULE_ENV_VARS.items():
        value = os.getenv(var)
        if value is not None and value.strip():
            rules[option] = value.strip()
    return rules


def holidays_from_env() -> list:
    """Public holidays as ISO dates, e.g. HOLIDAYS=2025-05-01,2025-12-25."""

    return [d.strip() for d in os.getenv("HOLIDAYS", "").split(",") if d.strip()]
