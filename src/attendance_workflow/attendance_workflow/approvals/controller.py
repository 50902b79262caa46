from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_identity, json_body, login_required, parse_bool, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/approvals/review", methods=["POST"], endpoint="review_reason")
    @login_required
    def review_reason():
        identity = current_identity()
        data = json_body()
        approval = container.approval_service.review(
            reviewer_id=identity.user_id,
            current_role=identity.role,
            reason_id=str(require_field(data, "reason_id")),
            approved=parse_bool(require_field(data, "approved"), "approved"),
            notes=data.get("approval_notes"),
        )
        return jsonify(approval.to_dict()), 201

    @app.route("/approvals/reason/<reason_id>", methods=["GET"], endpoint="reason_approvals")
    @login_required
    def reason_approvals(reason_id: str):
        identity = current_identity()
        approvals = container.approval_service.list_for_reason(current_role=identity.role, reason_id=reason_id)
        return jsonify([a.to_dict() for a in approvals]), 200

    @app.route("/approvals/instructor/<instructor_id>", methods=["GET"], endpoint="reviewer_approvals")
    @login_required
    def reviewer_approvals(instructor_id: str):
        identity = current_identity()
        approvals = container.approval_service.list_by_reviewer(
            current_role=identity.role, instructor_id=instructor_id
        )
        return jsonify([a.to_dict() for a in approvals]), 200
