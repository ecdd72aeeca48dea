"""Time entry validation and normalization.

``validate_and_normalize`` is a pure function of the candidate, the stored
entries of the same employee and date, and the rules. It either returns a
``NormalizedEntry`` ready for persistence or raises a ``DomainError``
subclass naming the violated rule. Persistence, locking and the weekly
ceiling belong to the caller (``TimeEntryService``).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..common.datetime_utils import format_iso_date, is_aware, minutes_between, minutes_to_hours, to_canonical
from ..core.exceptions import (
    DailyLimitExceededError,
    InsufficientBreakError,
    InvalidInputError,
    OverlapError,
)
from ..core.rules import EngineRules
from .model import NormalizedEntry, TimeEntry, TimeEntryCandidate
from .rounding.factory import RoundingStrategyFactory

logger = logging.getLogger(__name__)


class Interval(Protocol):
    start: datetime
    end: datetime


def overlaps(a: Interval, b: Interval) -> bool:
    """Half-open interval test in UTC: touching intervals do not overlap."""

    a_start, a_end = to_canonical(a.start), to_canonical(a.end)
    b_start, b_end = to_canonical(b.start), to_canonical(b.end)
    return a_start < b_end and a_end > b_start


def find_conflicts(candidate: Interval, existing: Iterable[TimeEntry], *, exclude_id: Optional[int] = None) -> list[int]:
    return sorted(
        e.entry_id
        for e in existing
        if (exclude_id is None or e.entry_id != exclude_id) and overlaps(candidate, e)
    )


def derive_break(start: datetime, end: datetime, rules: EngineRules) -> int:
    """Statutory break for a shift of this length."""

    if minutes_between(start, end) >= rules.break_threshold_minutes:
        return rules.break_duration_minutes
    return 0


def _check_structure(candidate: TimeEntryCandidate) -> None:
    missing = [
        name
        for name in ("employee_id", "work_date", "start", "end")
        if getattr(candidate, name) is None
    ]
    if missing:
        raise InvalidInputError("Required fields are missing", fields=missing)

    if not is_aware(candidate.start) or not is_aware(candidate.end):
        raise InvalidInputError("Start and end must carry a timezone offset")
    if to_canonical(candidate.start) >= to_canonical(candidate.end):
        raise InvalidInputError("Start must be before end")
    if candidate.start.date() != candidate.work_date:
        raise InvalidInputError(
            "Start does not fall on the entry date",
            work_date=format_iso_date(candidate.work_date),
            start=candidate.start.isoformat(),
        )
    if candidate.break_minutes is not None and int(candidate.break_minutes) < 0:
        raise InvalidInputError("Break must not be negative", break_minutes=candidate.break_minutes)


def _round(candidate: TimeEntryCandidate, rules: EngineRules, factory: RoundingStrategyFactory) -> tuple[datetime, datetime]:
    if not rules.rounding_minutes:
        return candidate.start, candidate.end

    strategy = factory.for_method(rules.rounding_method)
    start = strategy.round(candidate.start, rules.rounding_minutes)
    end = strategy.round(candidate.end, rules.rounding_minutes)
    if to_canonical(start) >= to_canonical(end):
        raise InvalidInputError(
            "Entry is empty after rounding",
            rounding_minutes=rules.rounding_minutes,
            rounding_method=rules.rounding_method.value,
        )
    return start, end


def _normalize_break(candidate: TimeEntryCandidate, start: datetime, end: datetime, rules: EngineRules) -> tuple[int, bool]:
    span = minutes_between(start, end)

    if rules.automatic_break_deduction and not candidate.break_minutes:
        return derive_break(start, end, rules), True

    break_minutes = int(candidate.break_minutes or 0)
    if break_minutes >= span:
        raise InvalidInputError("Break must be shorter than the entry", break_minutes=break_minutes, span_minutes=span)
    if span >= rules.break_threshold_minutes and break_minutes < rules.break_duration_minutes:
        raise InsufficientBreakError(
            "Break is shorter than the statutory minimum",
            break_minutes=break_minutes,
            required_minutes=rules.break_duration_minutes,
            threshold_hours=rules.minimum_break_threshold_hours,
        )
    return break_minutes, False


def validate_and_normalize(
    candidate: TimeEntryCandidate,
    existing_entries: Sequence[TimeEntry],
    rules: EngineRules,
    *,
    rounding_factory: Optional[RoundingStrategyFactory] = None,
) -> NormalizedEntry:
    _check_structure(candidate)
    start, end = _round(candidate, rules, rounding_factory or RoundingStrategyFactory())

    same_day = [
        e
        for e in existing_entries
        if e.employee_id == candidate.employee_id
        and e.work_date == candidate.work_date
        and (candidate.entry_id is None or e.entry_id != candidate.entry_id)
    ]

    rounded = replace(candidate, start=start, end=end)
    conflicts = find_conflicts(rounded, same_day)
    if conflicts:
        raise OverlapError("Entry overlaps existing entries", conflicting_ids=conflicts)

    break_minutes, derived = _normalize_break(candidate, start, end, rules)

    entry = NormalizedEntry(
        employee_id=int(candidate.employee_id),
        work_date=candidate.work_date,
        start=start,
        end=end,
        break_minutes=break_minutes,
        project=(candidate.project or "").strip() or rules.default_project_code,
        notes=(candidate.notes or "").strip() or None,
        entry_id=candidate.entry_id,
        break_derived=derived,
    )

    day_total = entry.worked_minutes + sum(e.worked_minutes for e in same_day)
    if day_total > rules.max_daily_minutes:
        raise DailyLimitExceededError(
            "Daily working time limit exceeded",
            worked_hours=str(minutes_to_hours(day_total)),
            max_daily_hours=rules.max_daily_hours,
        )

    logger.debug(
        "Entry for employee %s on %s normalized (%s-%s, break=%s)",
        entry.employee_id,
        format_iso_date(entry.work_date),
        entry.start.isoformat(),
        entry.end.isoformat(),
        entry.break_minutes,
    )
    return entry
