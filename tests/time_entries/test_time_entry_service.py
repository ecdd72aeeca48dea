from datetime import date

import pytest

from time_leave_system.container import assemble
from time_leave_system.core.exceptions import (
    AuthorizationError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    OverlapError,
    WeeklyLimitExceededError,
)
from time_leave_system.time_entries.model import TimeEntryCandidate

from tests.fakes import (
    EMPLOYEE_ID,
    FailingDispatcher,
    InMemoryLeaveRepository,
    InMemoryTimeEntryRepository,
    berlin,
)


def shift(day: int, start_h: int, end_h: int, *, end_min: int = 0, month: int = 5, **kwargs) -> TimeEntryCandidate:
    return TimeEntryCandidate(
        employee_id=EMPLOYEE_ID,
        work_date=date(2025, month, day),
        start=berlin(2025, month, day, start_h, 0),
        end=berlin(2025, month, day, end_h, end_min),
        **kwargs,
    )


def test_submit_persists_and_notifies(container, employee, dispatcher):
    saved = container.time_entry_service.submit(actor=employee, candidate=shift(5, 9, 17, break_minutes=45))

    assert saved.entry_id == 1
    assert saved.worked_minutes == 435
    assert dispatcher.names == ["timeEntryCreated"]
    payload = dispatcher.events[0][1]
    assert payload.employee.employee_id == EMPLOYEE_ID
    assert payload.manager.employee_id == employee.manager_id


def test_second_overlapping_submit_is_rejected(container, employee):
    service = container.time_entry_service
    first = service.submit(actor=employee, candidate=shift(5, 9, 12))
    with pytest.raises(OverlapError) as exc:
        service.submit(actor=employee, candidate=shift(5, 11, 14))
    assert exc.value.conflicting_ids == [first.entry_id]


def test_weekly_limit_uses_the_iso_week(container, employee):
    service = container.time_entry_service
    # Monday 5 May to Friday 9 May: five 8h days, 40h in total.
    for day in range(5, 10):
        service.submit(actor=employee, candidate=shift(day, 8, 16, end_min=30, break_minutes=30))
    # Saturday would push the week past 40h.
    with pytest.raises(WeeklyLimitExceededError) as exc:
        service.submit(actor=employee, candidate=shift(10, 9, 11))
    assert exc.value.details["week_start"] == "2025-05-05"

    # The next week starts fresh.
    service.submit(actor=employee, candidate=shift(12, 9, 11))


def test_update_revalidates_without_self_overlap(container, employee, dispatcher):
    service = container.time_entry_service
    saved = service.submit(actor=employee, candidate=shift(5, 9, 12))

    updated = service.update(
        actor=employee,
        entry_id=saved.entry_id,
        candidate=TimeEntryCandidate(
            employee_id=None,
            work_date=None,
            start=None,
            end=berlin(2025, 5, 5, 13, 0),
            project="ACME",
        ),
    )

    assert updated.start == saved.start
    assert updated.end == berlin(2025, 5, 5, 13, 0)
    assert updated.project == "ACME"
    assert dispatcher.names == ["timeEntryCreated", "timeEntryUpdated"]


def test_delete_removes_entry(container, employee, dispatcher):
    service = container.time_entry_service
    saved = service.submit(actor=employee, candidate=shift(5, 9, 12))
    service.delete(actor=employee, entry_id=saved.entry_id)

    with pytest.raises(NotFoundError):
        service.get(saved.entry_id)
    assert dispatcher.names[-1] == "timeEntryDeleted"


def test_other_employees_cannot_write_entries(container, other):
    with pytest.raises(AuthorizationError):
        container.time_entry_service.submit(actor=other, candidate=shift(5, 9, 12))


def test_manager_may_record_for_report(container, manager):
    saved = container.time_entry_service.submit(actor=manager, candidate=shift(5, 9, 12))
    assert saved.employee_id == EMPLOYEE_ID


def test_new_entry_must_not_carry_id(container, employee):
    with pytest.raises(InvalidInputError):
        container.time_entry_service.submit(actor=employee, candidate=shift(5, 9, 12, entry_id=99))


def test_monthly_total(container, employee):
    service = container.time_entry_service
    service.submit(actor=employee, candidate=shift(5, 9, 17, break_minutes=30))
    service.submit(actor=employee, candidate=shift(6, 9, 12))
    service.submit(actor=employee, candidate=shift(2, 9, 12, month=6))

    total = service.monthly_total(actor=employee, employee_id=EMPLOYEE_ID, year=2025, month=5)

    assert total["entry_count"] == 2
    assert total["total_minutes"] == 450 + 180
    assert total["total_hours"] == "10.50"


def test_dispatch_failure_keeps_the_entry(employees_repo, employee, rules):
    entries = InMemoryTimeEntryRepository()
    container = assemble(
        employees_repo=employees_repo,
        time_entries_repo=entries,
        leave_repo=InMemoryLeaveRepository(employees_repo),
        rules=rules,
        dispatcher=FailingDispatcher(),
    )
    saved = container.time_entry_service.submit(actor=employee, candidate=shift(5, 9, 12))
    assert entries.get_by_id(saved.entry_id) == saved


def test_manager_approves_entry_and_an_edit_clears_it(container, employee, manager, dispatcher):
    service = container.time_entry_service
    saved = service.submit(actor=employee, candidate=shift(5, 9, 12))

    approved = service.approve(actor=manager, entry_id=saved.entry_id)
    assert approved.approved_by == manager.employee_id
    assert approved.approved_at is not None
    assert dispatcher.names == ["timeEntryCreated", "timeEntryApproved"]
    assert dispatcher.events[1][1].actor_id == manager.employee_id

    with pytest.raises(InvalidTransitionError):
        service.approve(actor=manager, entry_id=saved.entry_id)

    edited = service.update(
        actor=employee,
        entry_id=saved.entry_id,
        candidate=TimeEntryCandidate(employee_id=None, work_date=None, start=None, end=berlin(2025, 5, 5, 13, 0)),
    )
    assert edited.is_approved is False
    assert edited.worked_minutes == 240


def test_entries_cannot_be_approved_by_their_owner_or_outsiders(container, employee, other):
    service = container.time_entry_service
    saved = service.submit(actor=employee, candidate=shift(5, 9, 12))
    for actor in (employee, other):
        with pytest.raises(AuthorizationError):
            service.approve(actor=actor, entry_id=saved.entry_id)
    assert service.get(saved.entry_id).is_approved is False
