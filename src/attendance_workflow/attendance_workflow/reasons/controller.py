from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_identity, json_body, login_required, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/reasons/submit", methods=["POST"], endpoint="submit_reason")
    @login_required
    def submit_reason():
        identity = current_identity()
        data = json_body()
        reason = container.reason_service.submit(
            user_id=identity.user_id,
            current_role=identity.role,
            attendance_id=str(require_field(data, "attendance_id")),
            reason_type=require_field(data, "reason_type"),
            reason_text=require_field(data, "reason_text"),
        )
        return jsonify(reason.to_dict()), 201

    @app.route("/reasons/pending", methods=["GET"], endpoint="pending_reasons")
    @login_required
    def pending_reasons():
        identity = current_identity()
        views = container.reason_service.list_pending(current_role=identity.role)
        return jsonify([v.to_dict() for v in views]), 200

    @app.route("/reasons/student/<student_id>", methods=["GET"], endpoint="student_reasons")
    @login_required
    def student_reasons(student_id: str):
        identity = current_identity()
        views = container.reason_service.list_for_student(
            user_id=identity.user_id, current_role=identity.role, student_id=student_id
        )
        return jsonify([v.to_dict() for v in views]), 200

    @app.route("/reasons/<reason_id>", methods=["GET"], endpoint="get_reason")
    @login_required
    def get_reason(reason_id: str):
        identity = current_identity()
        view = container.reason_service.get(user_id=identity.user_id, current_role=identity.role, reason_id=reason_id)
        return jsonify(view.to_dict()), 200
