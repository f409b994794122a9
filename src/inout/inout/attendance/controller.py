from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.web import current_uid, json_endpoint, login_required
from ..container import Container
from ..core.enums import AttendanceAction
from ..core.exceptions import ValidationError
from ..verification.collaborators import biometric_from_payload, location_from_payload
from .model import record_to_document
from .service import day_state_label
from .state_machine import DayStatus

_ACTIONS = {
    "check-in": AttendanceAction.CHECK_IN,
    "transit": AttendanceAction.TRANSIT,
    "check-out": AttendanceAction.CHECK_OUT,
}

_SUCCESS_MESSAGES = {
    AttendanceAction.CHECK_IN: "Checked in successfully!",
    AttendanceAction.TRANSIT: "Transit verified successfully!",
    AttendanceAction.CHECK_OUT: "Checked out successfully!",
}

_CSV_FIELDS = [
    "date",
    "employee_id",
    "employee_name",
    "check_in",
    "check_out",
    "total_hours",
    "location",
    "movement",
    "distance_m",
    "status",
]


def _status_json(status: DayStatus) -> dict:
    return {
        "state": status.state.value,
        "label": day_state_label(status.state),
        "text": status.text,
        "allowed_actions": sorted(a.value for a in status.allowed_actions),
        "record": record_to_document(status.record) if status.record else None,
        "location": status.location.name if status.location else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    @json_endpoint
    def attendance_status():
        status = container.attendance_service.get_status(current_uid())
        return jsonify({"success": True, **_status_json(status)})

    @app.route("/api/attendance/<action_name>", methods=["POST"], endpoint="attendance_action")
    @login_required
    @json_endpoint
    def attendance_action(action_name: str):
        """Run one action with the device's biometric and GPS results.

        Body: ``{"biometric": {"outcome": ...}, "location": {"lat", "lng"}}``.
        """
        action = _ACTIONS.get(action_name)
        if action is None:
            raise ValidationError(f"Unknown attendance action: {action_name}")

        data = request.get_json(silent=True) or {}
        commit = container.attendance_service.perform_reported(
            current_uid(),
            action,
            biometric=biometric_from_payload(data.get("biometric")),
            location=location_from_payload(data.get("location")),
        )
        status = container.attendance_service.get_status(current_uid())
        return jsonify({
            "success": True,
            "action": commit.action.value,
            "record_id": commit.record_id,
            "distance_meters": round(commit.distance_meters, 1),
            "message": _SUCCESS_MESSAGES[commit.action],
            "status": _status_json(status),
        })

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    @json_endpoint
    def attendance_history():
        limit = request.args.get("limit", type=int)
        kwargs = {"limit": limit} if limit else {}
        report = container.attendance_service.build_report(current_uid(), **kwargs)
        return jsonify({"success": True, "rows": report.rows, "total_hours": report.total_hours})

    @app.route("/me/history.csv", methods=["GET"], endpoint="attendance_history_csv")
    @login_required
    @json_endpoint
    def attendance_history_csv():
        report = container.attendance_service.build_report(current_uid())

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in report.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=my_attendance.csv"},
        )
