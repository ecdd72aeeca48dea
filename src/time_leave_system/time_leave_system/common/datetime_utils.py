"""Date/time arithmetic shared by the whole engine.

Every parse, format, timezone conversion and day/duration calculation goes
through this module; business-rule code never handles date strings inline.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from ..core.enums import RoundingMethod
from ..core.exceptions import InvalidInputError

ISO_DATE_FORMAT = "%Y-%m-%d"
LOCAL_DATE_FORMAT = "%d.%m.%Y"
WALL_CLOCK_FORMAT = "%H:%M"

_TWO_PLACES = Decimal("0.01")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), ISO_DATE_FORMAT).date()
    except ValueError:
        raise InvalidInputError("Invalid date (expected YYYY-MM-DD)", value=value)


def parse_local_date(value: str) -> date:
    """Parse a dd.MM.yyyy string (the format leave forms submit) into date."""
    try:
        return datetime.strptime((value or "").strip(), LOCAL_DATE_FORMAT).date()
    except ValueError:
        raise InvalidInputError("Invalid date (expected dd.MM.yyyy)", value=value)


def parse_any_date(value: str) -> date:
    v = (value or "").strip()
    if "." in v:
        return parse_local_date(v)
    return parse_iso_date(v)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp that carries an explicit UTC offset."""
    try:
        ts = datetime.fromisoformat((value or "").strip().replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInputError("Invalid timestamp (expected ISO-8601)", value=value)
    if not is_aware(ts):
        raise InvalidInputError("Timestamp must carry a timezone offset", value=value)
    return ts


def parse_wall_clock(value: str) -> time:
    try:
        return datetime.strptime((value or "").strip(), WALL_CLOCK_FORMAT).time()
    except ValueError:
        raise InvalidInputError("Invalid time (expected HH:MM)", value=value)


def is_aware(ts: datetime) -> bool:
    return ts.tzinfo is not None and ts.tzinfo.utcoffset(ts) is not None


def combine_local(work_date: date, wall_clock: str, tz_name: str) -> datetime:
    """Build an aware timestamp from a calendar date and an HH:MM wall-clock time."""
    return datetime.combine(work_date, parse_wall_clock(wall_clock), tzinfo=ZoneInfo(tz_name))


def to_canonical(ts: datetime) -> datetime:
    """Convert to UTC, the single zone every comparison is made in."""
    if not is_aware(ts):
        raise InvalidInputError("Timestamp must carry a timezone offset", value=str(ts))
    return ts.astimezone(timezone.utc)


def to_local(ts: datetime, tz_name: str) -> datetime:
    return ts.astimezone(ZoneInfo(tz_name))


def local_date(ts: datetime, tz_name: str) -> date:
    return ts.astimezone(ZoneInfo(tz_name)).date()


def format_local(ts: datetime, tz_name: str, pattern: str = WALL_CLOCK_FORMAT) -> str:
    return ts.astimezone(ZoneInfo(tz_name)).strftime(pattern)


def format_iso_date(value: date) -> str:
    return value.strftime(ISO_DATE_FORMAT)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end (negative when end precedes start)."""
    return int((to_canonical(end) - to_canonical(start)).total_seconds() // 60)


def minutes_to_hours(minutes: int) -> Decimal:
    return (Decimal(int(minutes)) / Decimal(60)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def percentage(part: int, whole: int) -> Decimal:
    if whole <= 0:
        return Decimal("0.00")
    return (Decimal(int(part)) * Decimal(100) / Decimal(int(whole))).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def round_timestamp(ts: datetime, step_minutes: int, method: RoundingMethod | str) -> datetime:
    """Snap the wall-clock time of ``ts`` to a multiple of ``step_minutes``.

    The step is measured from local midnight in the timestamp's own offset, so
    15-minute rounding lands on quarter hours whatever the zone. ``nearest``
    rounds half up.
    """

    if step_minutes <= 0:
        return ts

    method = RoundingMethod(method)
    midnight = ts.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = ts - midnight
    step = timedelta(minutes=step_minutes)

    if method == RoundingMethod.DOWN:
        steps = elapsed // step
    elif method == RoundingMethod.UP:
        steps = -(-elapsed // step)
    else:
        steps = (elapsed + step / 2) // step

    return midnight + step * steps


def inclusive_day_count(start: date, end: date) -> int:
    """Number of calendar days from start to end, both included."""
    if end < start:
        raise InvalidInputError(
            "End date must not be before start date",
            start_date=format_iso_date(start),
            end_date=format_iso_date(end),
        )
    return (end - start).days + 1


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def clip_range(start: date, end: date, lower: date, upper: date) -> Optional[tuple[date, date]]:
    """Intersection of [start, end] with [lower, upper], or None when disjoint."""
    lo = max(start, lower)
    hi = min(end, upper)
    if lo > hi:
        return None
    return lo, hi


def overlap_days(a_start: date, a_end: date, b_start: date, b_end: date) -> int:
    """Calendar days shared by two inclusive date ranges."""
    clipped = clip_range(a_start, a_end, b_start, b_end)
    if clipped is None:
        return 0
    return inclusive_day_count(*clipped)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the ISO week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise InvalidInputError("Month must be between 1 and 12", month=month)
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock it easily.
    """
    return datetime.now(timezone.utc)
