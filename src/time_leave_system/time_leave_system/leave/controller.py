from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, format_local, parse_any_date
from ..common.http import current_actor, date_arg, int_value, json_body, json_endpoint
from ..container import Container
from ..core.enums import LeaveStatus
from ..core.exceptions import InvalidInputError
from .model import LeaveRequest, NewLeaveRequest


def leave_to_dict(r: LeaveRequest, tz_name: str) -> dict:
    return {
        "request_id": r.request_id,
        "employee_id": r.employee_id,
        "start_date": format_iso_date(r.start_date),
        "end_date": format_iso_date(r.end_date),
        "leave_type": r.leave_type,
        "status": r.status.value,
        "substitute_id": r.substitute_id,
        "notes": r.notes,
        "days_charged": r.days_charged,
        "decided_by": r.decided_by,
        "decided_at": format_local(r.decided_at, tz_name, "%Y-%m-%dT%H:%M:%S%z") if r.decided_at else None,
        "decision_reason": r.decision_reason,
        "created_at": format_local(r.created_at, tz_name, "%Y-%m-%dT%H:%M:%S%z"),
    }


def _status_arg():
    raw = request.args.get("status")
    if not raw:
        return None
    try:
        return LeaveStatus(raw.strip().upper())
    except ValueError:
        raise InvalidInputError("Unknown leave status", status=raw, allowed=[s.value for s in LeaveStatus])


def _required_date(data: dict, *keys: str):
    for key in keys:
        if data.get(key):
            return parse_any_date(str(data[key]))
    raise InvalidInputError(f"{keys[0]} is required", field=keys[0])


def register(app: Flask, container: Container) -> None:
    service = container.leave_service
    tz_name = container.rules.timezone

    @app.route("/api/leave-requests", methods=["GET"], endpoint="list_leave_requests")
    @json_endpoint
    def list_leave_requests():
        actor = current_actor(container.employee_service)
        requests = service.list_for_employee(
            actor=actor,
            employee_id=int_value(request.args.get("employee_id"), "employee_id") or actor.employee_id,
            start=date_arg("start"),
            end=date_arg("end"),
            status=_status_arg(),
        )
        return jsonify({"success": True, "leave_requests": [leave_to_dict(r, tz_name) for r in requests]})

    @app.route("/api/leave-requests/pending", methods=["GET"], endpoint="pending_leave_requests")
    @json_endpoint
    def pending_leave_requests():
        actor = current_actor(container.employee_service)
        requests = service.list_pending_for(actor=actor)
        return jsonify({"success": True, "leave_requests": [leave_to_dict(r, tz_name) for r in requests]})

    @app.route("/api/leave-requests", methods=["POST"], endpoint="create_leave_request")
    @json_endpoint
    def create_leave_request():
        actor = current_actor(container.employee_service)
        data = json_body()
        saved = service.submit(
            actor=actor,
            data=NewLeaveRequest(
                employee_id=int_value(data.get("employee_id", data.get("employeeId")), "employee_id")
                or actor.employee_id,
                start_date=_required_date(data, "start_date", "startDate"),
                end_date=_required_date(data, "end_date", "endDate"),
                leave_type=str(data.get("leave_type") or data.get("type") or ""),
                substitute_id=int_value(data.get("substitute_id", data.get("substituteId")), "substitute_id"),
                notes=data.get("notes"),
            ),
        )
        return jsonify({"success": True, "leave_request": leave_to_dict(saved, tz_name)}), 201

    @app.route("/api/leave-requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave_request")
    @json_endpoint
    def approve_leave_request(request_id: int):
        actor = current_actor(container.employee_service)
        saved = service.approve(actor=actor, request_id=request_id)
        return jsonify({"success": True, "leave_request": leave_to_dict(saved, tz_name)})

    @app.route("/api/leave-requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave_request")
    @json_endpoint
    def reject_leave_request(request_id: int):
        actor = current_actor(container.employee_service)
        saved = service.reject(actor=actor, request_id=request_id, reason=json_body().get("reason", ""))
        return jsonify({"success": True, "leave_request": leave_to_dict(saved, tz_name)})

    @app.route("/api/leave-requests/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_leave_request")
    @json_endpoint
    def cancel_leave_request(request_id: int):
        actor = current_actor(container.employee_service)
        saved = service.cancel(actor=actor, request_id=request_id, reason=json_body().get("reason"))
        return jsonify({"success": True, "leave_request": leave_to_dict(saved, tz_name)})
