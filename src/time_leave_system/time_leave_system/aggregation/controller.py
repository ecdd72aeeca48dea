from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import format_iso_date, month_bounds, now_utc
from ..common.http import current_actor, date_arg, int_value, json_endpoint
from ..container import Container
from .export import MIMETYPES, entries_frame, export_entries


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _period():
        today = now_utc().date()
        year = int_value(request.args.get("year"), "year")
        month = int_value(request.args.get("month"), "month")
        if year or month:
            return month_bounds(year or today.year, month or today.month)
        default_start, default_end = month_bounds(today.year, today.month)
        return date_arg("start", default_start), date_arg("end", default_end)

    @app.route("/api/reports/summary/<int:employee_id>", methods=["GET"], endpoint="report_summary")
    @json_endpoint
    def report_summary(employee_id: int):
        actor = current_actor(container.employee_service)
        start, end = _period()
        summary = service.summary(actor=actor, employee_id=employee_id, start=start, end=end)
        return jsonify({"success": True, "summary": summary.to_dict()})

    @app.route("/api/reports/weekly/<int:employee_id>", methods=["GET"], endpoint="report_weekly")
    @json_endpoint
    def report_weekly(employee_id: int):
        actor = current_actor(container.employee_service)
        start, end = _period()
        weeks = service.weekly(actor=actor, employee_id=employee_id, start=start, end=end)
        return jsonify(
            {
                "success": True,
                "weeks": [
                    {
                        "week_start": format_iso_date(w.week_start),
                        "week_end": format_iso_date(w.week_end),
                        "worked_hours": str(w.worked_hours),
                    }
                    for w in weeks
                ],
            }
        )

    @app.route("/api/time-entries/export", methods=["GET"], endpoint="export_time_entries")
    @json_endpoint
    def export_time_entries():
        actor = current_actor(container.employee_service)
        employee_id = int_value(request.args.get("employee_id"), "employee_id") or actor.employee_id
        start, end = _period()
        fmt = (request.args.get("format") or "csv").strip().lower()

        employee, entries = service.entries_for_export(actor=actor, employee_id=employee_id, start=start, end=end)
        out = export_entries(entries_frame(employee, entries, tz_name=container.rules.timezone), fmt)
        return send_file(
            out,
            mimetype=MIMETYPES[fmt],
            as_attachment=True,
            download_name=f"time_entries_{employee.employee_id}_{format_iso_date(start)}_{format_iso_date(end)}.{fmt}",
        )
