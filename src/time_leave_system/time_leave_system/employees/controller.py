from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, int_value, json_body, json_endpoint
from ..core.enums import Role
from ..core.exceptions import InvalidInputError
from ..container import Container
from .model import Employee, NewEmployee


def employee_to_dict(e: Employee) -> dict:
    return {
        "employee_id": e.employee_id,
        "name": e.name,
        "email": e.email,
        "department": e.department,
        "manager_id": e.manager_id,
        "substitute_id": e.substitute_id,
        "annual_leave_balance": e.annual_leave_balance,
        "accrual_cap": e.accrual_cap,
        "role": e.role.value,
        "is_active": e.is_active,
    }


def _role(value) -> Role:
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        raise InvalidInputError("Unknown role", role=value, allowed=[r.value for r in Role])


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @json_endpoint
    def list_employees():
        actor = current_actor(service)
        include_inactive = actor.is_admin and request.args.get("include_inactive") in {"1", "true", "yes"}
        employees = service.list_all(include_inactive=include_inactive)
        return jsonify({"success": True, "employees": [employee_to_dict(e) for e in employees]})

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @json_endpoint
    def get_employee(employee_id: int):
        current_actor(service)
        return jsonify({"success": True, "employee": employee_to_dict(service.get(employee_id))})

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @json_endpoint
    def create_employee():
        actor = current_actor(service)
        data = json_body()
        new_id = service.create(
            actor=actor,
            data=NewEmployee(
                name=data.get("name", ""),
                email=data.get("email", ""),
                department=data.get("department", ""),
                manager_id=int_value(data.get("manager_id"), "manager_id"),
                substitute_id=int_value(data.get("substitute_id"), "substitute_id"),
                annual_leave_balance=int_value(data.get("annual_leave_balance"), "annual_leave_balance"),
                accrual_cap=int_value(data.get("accrual_cap"), "accrual_cap"),
                role=_role(data.get("role") or Role.EMPLOYEE.value),
            ),
        )
        return jsonify({"success": True, "employee": employee_to_dict(service.get(new_id))}), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PATCH"], endpoint="update_employee")
    @json_endpoint
    def update_employee(employee_id: int):
        actor = current_actor(service)
        data = json_body()
        employee = service.update_profile(
            actor=actor,
            employee_id=employee_id,
            name=data.get("name"),
            email=data.get("email"),
            department=data.get("department"),
            manager_id=int_value(data.get("manager_id"), "manager_id"),
            substitute_id=int_value(data.get("substitute_id"), "substitute_id"),
            accrual_cap=int_value(data.get("accrual_cap"), "accrual_cap"),
            role=_role(data["role"]) if data.get("role") else None,
            clear_manager="manager_id" in data and data["manager_id"] is None,
            clear_substitute="substitute_id" in data and data["substitute_id"] is None,
        )
        return jsonify({"success": True, "employee": employee_to_dict(employee)})

    @app.route("/api/employees/<int:employee_id>/disable", methods=["POST"], endpoint="disable_employee")
    @json_endpoint
    def disable_employee(employee_id: int):
        actor = current_actor(service)
        service.disable(actor=actor, employee_id=employee_id)
        return jsonify({"success": True})

    @app.route("/api/employees/<int:employee_id>/balance", methods=["PUT"], endpoint="adjust_balance")
    @json_endpoint
    def adjust_balance(employee_id: int):
        actor = current_actor(service)
        balance = int_value(json_body().get("annual_leave_balance"), "annual_leave_balance", required=True)
        employee = service.adjust_balance(actor=actor, employee_id=employee_id, balance=balance)
        return jsonify({"success": True, "employee": employee_to_dict(employee)})
