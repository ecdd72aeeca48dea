from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import (
    combine_local,
    format_iso_date,
    minutes_to_hours,
    month_bounds,
    now_utc,
    parse_any_date,
    parse_timestamp,
    to_local,
)
from ..common.http import current_actor, date_arg, int_value, json_body, json_endpoint
from ..container import Container
from ..core.rules import EngineRules
from .model import TimeEntry, TimeEntryCandidate


def entry_to_dict(e: TimeEntry, tz_name: str) -> dict:
    return {
        "entry_id": e.entry_id,
        "employee_id": e.employee_id,
        "date": format_iso_date(e.work_date),
        "start": to_local(e.start, tz_name).isoformat(),
        "end": to_local(e.end, tz_name).isoformat(),
        "break_minutes": e.break_minutes,
        "worked_hours": str(minutes_to_hours(e.worked_minutes)),
        "project": e.project,
        "notes": e.notes,
        "approved_by": e.approved_by,
        "approved_at": to_local(e.approved_at, tz_name).isoformat() if e.approved_at else None,
    }


def _timestamp(value, work_date: Optional[date], rules: EngineRules) -> Optional[datetime]:
    """Full ISO timestamps are taken as given; bare HH:MM is local to the configured zone."""

    if value is None or value == "":
        return None
    text = str(value).strip()
    if "T" in text or len(text) > 5:
        return parse_timestamp(text)
    if work_date is None:
        return None
    return combine_local(work_date, text, rules.timezone)


def candidate_from_json(data: dict, rules: EngineRules) -> TimeEntryCandidate:
    raw_date = data.get("date") or data.get("work_date")
    work_date = parse_any_date(raw_date) if raw_date else None

    start = _timestamp(data.get("start") or data.get("start_time"), work_date, rules)
    end = _timestamp(data.get("end") or data.get("end_time"), work_date, rules)
    if work_date is None and start is not None:
        work_date = start.date()

    break_raw = data.get("break_minutes", data.get("breakDuration"))
    return TimeEntryCandidate(
        employee_id=int_value(data.get("employee_id", data.get("employeeId")), "employee_id"),
        work_date=work_date,
        start=start,
        end=end,
        break_minutes=int_value(break_raw, "break_minutes"),
        project=data.get("project"),
        notes=data.get("notes"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.time_entry_service
    rules = container.rules

    @app.route("/api/time-entries", methods=["GET"], endpoint="list_time_entries")
    @json_endpoint
    def list_time_entries():
        actor = current_actor(container.employee_service)
        today = now_utc().date()
        month_start, month_end = month_bounds(today.year, today.month)
        employee_id = int_value(request.args.get("employee_id"), "employee_id") or actor.employee_id
        entries = service.list_for_employee(
            actor=actor,
            employee_id=employee_id,
            start=date_arg("start", month_start),
            end=date_arg("end", month_end),
        )
        return jsonify({"success": True, "entries": [entry_to_dict(e, rules.timezone) for e in entries]})

    @app.route("/api/time-entries", methods=["POST"], endpoint="create_time_entry")
    @json_endpoint
    def create_time_entry():
        actor = current_actor(container.employee_service)
        data = json_body()
        data.setdefault("employee_id", actor.employee_id)
        entry = service.submit(actor=actor, candidate=candidate_from_json(data, rules))
        return jsonify({"success": True, "entry": entry_to_dict(entry, rules.timezone)}), 201

    @app.route("/api/time-entries/<int:entry_id>", methods=["PUT"], endpoint="update_time_entry")
    @json_endpoint
    def update_time_entry(entry_id: int):
        actor = current_actor(container.employee_service)
        data = json_body()
        if not (data.get("date") or data.get("work_date")):
            data["date"] = format_iso_date(service.get(entry_id).work_date)
        entry = service.update(actor=actor, entry_id=entry_id, candidate=candidate_from_json(data, rules))
        return jsonify({"success": True, "entry": entry_to_dict(entry, rules.timezone)})

    @app.route("/api/time-entries/<int:entry_id>/approve", methods=["POST"], endpoint="approve_time_entry")
    @json_endpoint
    def approve_time_entry(entry_id: int):
        actor = current_actor(container.employee_service)
        entry = service.approve(actor=actor, entry_id=entry_id)
        return jsonify({"success": True, "entry": entry_to_dict(entry, rules.timezone)})

    @app.route("/api/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="delete_time_entry")
    @json_endpoint
    def delete_time_entry(entry_id: int):
        actor = current_actor(container.employee_service)
        service.delete(actor=actor, entry_id=entry_id)
        return jsonify({"success": True})

    @app.route(
        "/api/time-entries/monthly-total/<int:employee_id>",
        methods=["GET"],
        endpoint="monthly_total",
    )
    @json_endpoint
    def monthly_total(employee_id: int):
        actor = current_actor(container.employee_service)
        today = now_utc().date()
        total = service.monthly_total(
            actor=actor,
            employee_id=employee_id,
            year=int_value(request.args.get("year"), "year") or today.year,
            month=int_value(request.args.get("month"), "month") or today.month,
        )
        return jsonify({"success": True, **total})
