from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_identity, login_required, parse_int_arg
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        user_id = current_identity().user_id
        # A bare ?unread_only is a flag; anything other than a truthy value lists everything
        raw = request.args.get("unread_only")
        unread_only = raw is not None and raw.strip().lower() in {"", "true", "1", "yes"}
        limit = parse_int_arg(request.args.get("limit"), "limit", default=DEFAULT_NOTIFICATION_LIMIT)

        if unread_only:
            items = container.notification_service.list_unread(user_id=user_id, limit=limit)
        else:
            items = container.notification_service.list_all(user_id=user_id, limit=limit)
        return jsonify([n.to_dict() for n in items]), 200

    @app.route("/notifications/count/unread", methods=["GET"], endpoint="count_unread_notifications")
    @login_required
    def count_unread_notifications():
        count = container.notification_service.unread_count(user_id=current_identity().user_id)
        return jsonify({"unread_count": count}), 200

    @app.route("/notifications/read-all", methods=["PUT"], endpoint="mark_all_notifications_read")
    @login_required
    def mark_all_notifications_read():
        container.notification_service.mark_all_read(user_id=current_identity().user_id)
        return jsonify({"message": "All notifications marked as read"}), 200

    @app.route("/notifications/<notification_id>/read", methods=["PUT"], endpoint="mark_notification_read")
    @login_required
    def mark_notification_read(notification_id: str):
        notification = container.notification_service.mark_read(
            user_id=current_identity().user_id,
            notification_id=notification_id,
        )
        return jsonify(notification.to_dict()), 200

    @app.route("/notifications/<notification_id>", methods=["DELETE"], endpoint="delete_notification")
    @login_required
    def delete_notification(notification_id: str):
        container.notification_service.delete(user_id=current_identity().user_id, notification_id=notification_id)
        return jsonify({"message": "Notification deleted"}), 200
