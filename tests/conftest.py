from __future__ import annotations

import pytest

from time_leave_system.container import assemble
from time_leave_system.core.enums import Role
from time_leave_system.core.rules import EngineRules
from time_leave_system.employees.model import Employee

from tests.fakes import (
    ADMIN_ID,
    EMPLOYEE_ID,
    MANAGER_ID,
    OTHER_ID,
    InMemoryEmployeeRepository,
    InMemoryLeaveRepository,
    InMemoryTimeEntryRepository,
    RecordingDispatcher,
)


@pytest.fixture
def rules():
    return EngineRules()


@pytest.fixture
def employees_repo():
    return InMemoryEmployeeRepository(
        [
            Employee(ADMIN_ID, "Admin", "admin@example.com", "HR", role=Role.ADMIN),
            Employee(MANAGER_ID, "Maria", "maria@example.com", "Engineering", role=Role.MANAGER),
            Employee(EMPLOYEE_ID, "Erik", "erik@example.com", "Engineering", manager_id=MANAGER_ID),
            Employee(OTHER_ID, "Olga", "olga@example.com", "Sales"),
        ]
    )


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def container(employees_repo, rules, dispatcher):
    return assemble(
        employees_repo=employees_repo,
        time_entries_repo=InMemoryTimeEntryRepository(),
        leave_repo=InMemoryLeaveRepository(employees_repo),
        rules=rules,
        dispatcher=dispatcher,
    )


@pytest.fixture
def admin(employees_repo):
    return employees_repo.get_by_id(ADMIN_ID)


@pytest.fixture
def manager(employees_repo):
    return employees_repo.get_by_id(MANAGER_ID)


@pytest.fixture
def employee(employees_repo):
    return employees_repo.get_by_id(EMPLOYEE_ID)


@pytest.fixture
def other(employees_repo):
    return employees_repo.get_by_id(OTHER_ID)
