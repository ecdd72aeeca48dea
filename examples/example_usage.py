"""Example: drive the engine directly, without Flask or a database.

Controllers are thin; the rules live in pure functions that take an explicit
EngineRules value.
"""

from datetime import date, datetime, timezone

from time_leave_system.core.exceptions import DomainError
from time_leave_system.core.rules import EngineRules
from time_leave_system.time_entries.model import TimeEntryCandidate
from time_leave_system.time_entries.validator import validate_and_normalize


def main():
    rules = EngineRules.from_mapping({"maxDailyHours": 10, "roundingMinutes": 15})
    candidate = TimeEntryCandidate(
        employee_id=1,
        work_date=date(2025, 5, 1),
        start=datetime(2025, 5, 1, 7, 58, tzinfo=timezone.utc),
        end=datetime(2025, 5, 1, 17, 4, tzinfo=timezone.utc),
        project="ACME-42",
    )
    try:
        entry = validate_and_normalize(candidate, [], rules)
    except DomainError as e:
        print("rejected:", e.to_dict())
        return
    print(entry.start.time(), entry.end.time(), "break", entry.break_minutes, "worked", entry.worked_minutes)


if __name__ == "__main__":
    main()
