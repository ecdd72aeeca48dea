import pytest

from time_leave_system.core.enums import Role
from time_leave_system.core.exceptions import AuthorizationError, InvalidInputError, NotFoundError
from time_leave_system.employees.model import NewEmployee

from tests.fakes import EMPLOYEE_ID, MANAGER_ID


def test_admin_creates_employee_with_default_balance(container, admin):
    service = container.employee_service
    new_id = service.create(
        actor=admin,
        data=NewEmployee(name="Nina", email=" Nina@Example.com ", department="Ops", manager_id=MANAGER_ID),
    )
    created = service.get(new_id)
    assert created.email == "nina@example.com"
    assert created.annual_leave_balance == 30
    assert created.role == Role.EMPLOYEE


def test_non_admin_cannot_manage_employees(container, manager):
    with pytest.raises(AuthorizationError):
        container.employee_service.create(
            actor=manager, data=NewEmployee(name="X", email="x@example.com", department="Ops")
        )


def test_duplicate_email_is_rejected(container, admin):
    with pytest.raises(InvalidInputError):
        container.employee_service.create(
            actor=admin, data=NewEmployee(name="Erik 2", email="erik@example.com", department="Ops")
        )


def test_employee_cannot_be_own_manager_or_substitute(container, admin):
    service = container.employee_service
    with pytest.raises(InvalidInputError):
        service.update_profile(actor=admin, employee_id=EMPLOYEE_ID, manager_id=EMPLOYEE_ID)
    with pytest.raises(InvalidInputError):
        service.update_profile(actor=admin, employee_id=EMPLOYEE_ID, substitute_id=EMPLOYEE_ID)


def test_update_profile_can_clear_manager(container, admin):
    updated = container.employee_service.update_profile(actor=admin, employee_id=EMPLOYEE_ID, clear_manager=True)
    assert updated.manager_id is None


def test_balance_stays_within_bounds(container, admin):
    service = container.employee_service
    assert service.adjust_balance(actor=admin, employee_id=EMPLOYEE_ID, balance=12).annual_leave_balance == 12
    with pytest.raises(InvalidInputError):
        service.adjust_balance(actor=admin, employee_id=EMPLOYEE_ID, balance=-1)
    with pytest.raises(InvalidInputError):
        service.adjust_balance(actor=admin, employee_id=EMPLOYEE_ID, balance=31)


def test_disable_is_soft(container, admin):
    service = container.employee_service
    service.disable(actor=admin, employee_id=EMPLOYEE_ID)
    assert service.get(EMPLOYEE_ID).is_active is False
    assert EMPLOYEE_ID not in [e.employee_id for e in service.list_all()]
    assert EMPLOYEE_ID in [e.employee_id for e in service.list_all(include_inactive=True)]

    with pytest.raises(InvalidInputError):
        service.disable(actor=admin, employee_id=admin.employee_id)


def test_unknown_employee(container):
    with pytest.raises(NotFoundError):
        container.employee_service.get(404)
