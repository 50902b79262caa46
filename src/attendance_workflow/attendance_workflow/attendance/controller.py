from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc, parse_iso_date, parse_iso_datetime
from ..common.web import json_body, login_required, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _optional_date(value):
        return parse_iso_date(value) if value else None

    @app.route("/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        data = json_body()
        event = container.attendance_service.mark(
            student_id=str(require_field(data, "student_id")),
            class_id=str(require_field(data, "class_id")),
            work_date=parse_iso_date(require_field(data, "date")),
            status=data.get("status"),
            notes=data.get("notes"),
        )
        return jsonify(event.to_dict()), 201

    @app.route("/attendance/scan", methods=["POST"], endpoint="scan_attendance")
    @login_required
    def scan_attendance():
        """Scanner flow: classify now, record present/late, notify on late."""
        data = json_body()
        event, classification = container.attendance_service.scan(
            student_id=str(require_field(data, "student_id")),
            class_id=str(require_field(data, "class_id")),
            notes=data.get("notes"),
        )
        return jsonify({"attendance": event.to_dict(), "classification": classification.to_dict()}), 201

    @app.route("/attendance/classify", methods=["GET"], endpoint="classify_arrival")
    @login_required
    def classify_arrival():
        student_id = request.args.get("student_id") or ""
        class_id = str(require_field(request.args, "class_id"))

        at = request.args.get("at")
        arrival = parse_iso_datetime(at, zone=container.zone, field_name="at") if at else now_utc()
        result = container.attendance_service.classify(student_id=student_id, class_id=class_id, arrival=arrival)
        return jsonify(result.to_dict()), 200

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        events = container.attendance_service.list_events(
            student_id=request.args.get("student_id") or None,
            class_id=request.args.get("class_id") or None,
            work_date=_optional_date(request.args.get("date")),
        )
        return jsonify([e.to_dict() for e in events]), 200

    @app.route("/attendance/summary/<student_id>", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary(student_id: str):
        rows = container.attendance_service.summary(
            student_id=student_id,
            class_id=request.args.get("class_id") or None,
        )
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/attendance/report/class/<class_id>", methods=["GET"], endpoint="class_attendance_report")
    @login_required
    def class_attendance_report(class_id: str):
        rows = container.attendance_service.class_report(
            class_id=class_id,
            work_date=_optional_date(request.args.get("date")),
        )
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/attendance/<attendance_id>", methods=["GET"], endpoint="get_attendance")
    @login_required
    def get_attendance(attendance_id: str):
        return jsonify(container.attendance_service.get(attendance_id).to_dict()), 200

    @app.route("/attendance/<attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @login_required
    def update_attendance(attendance_id: str):
        data = json_body()
        changes = {}
        if "status" in data:
            changes["status"] = data["status"]
        if "notes" in data:
            changes["notes"] = data["notes"]
        if "time_out" in data:
            raw = data["time_out"]
            changes["time_out"] = parse_iso_datetime(raw, zone=container.zone, field_name="time_out") if raw else None

        event = container.attendance_service.update(attendance_id=attendance_id, **changes)
        return jsonify(event.to_dict()), 200
