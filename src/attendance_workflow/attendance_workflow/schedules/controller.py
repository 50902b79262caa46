from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_identity, json_body, login_required, require_field, roles_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/schedules/class/<class_id>", methods=["GET"], endpoint="list_class_schedules")
    @login_required
    def list_class_schedules(class_id: str):
        entries = container.schedule_service.list_for_class(class_id)
        return jsonify([e.to_dict() for e in entries]), 200

    @app.route("/schedules", methods=["PUT"], endpoint="upsert_schedule")
    @roles_required(Role.ADMIN)
    def upsert_schedule():
        data = json_body()
        entry = container.schedule_service.assign(
            current_role=current_identity().role,
            class_id=str(require_field(data, "class_id")),
            day_of_week=require_field(data, "day_of_week"),
            start_time=require_field(data, "start_time"),
            end_time=require_field(data, "end_time"),
            late_threshold_minutes=data.get("late_threshold_minutes"),
        )
        return jsonify(entry.to_dict()), 200

    @app.route("/schedules/<schedule_id>", methods=["DELETE"], endpoint="delete_schedule")
    @roles_required(Role.ADMIN)
    def delete_schedule(schedule_id: str):
        container.schedule_service.delete(current_role=current_identity().role, schedule_id=schedule_id)
        return jsonify({"message": "Schedule deleted"}), 200
