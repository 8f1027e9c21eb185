from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_datetime
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import UserContext
from ..container import Container
from .service import count_by_status


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/leave", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            starts_at = parse_iso_datetime(data.get("from") or "")
            ends_at = parse_iso_datetime(data.get("to") or "")
        except ValueError:
            return jsonify({"success": False, "message": "Invalid from/to date"}), 400

        try:
            leave_id = container.leave_service.submit(
                UserContext.from_session(session),
                reason=data.get("reason", ""),
                starts_at=starts_at,
                ends_at=ends_at,
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except Exception:
            app.logger.exception("leave submission failed")
            return jsonify({"success": False, "message": "Failed to submit leave application"}), 500
        return jsonify({"success": True, "leave_id": leave_id, "message": "Leave application submitted"}), 201

    @app.route("/api/leave", methods=["GET"], endpoint="list_leave")
    @login_required
    def list_leave():
        try:
            applications = container.leave_service.list_visible(UserContext.from_session(session))
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify(
            {
                "applications": [a.to_dict() for a in applications],
                "counts": count_by_status(applications),
            }
        )

    @app.route("/api/leave/pending", methods=["GET"], endpoint="pending_leave")
    @login_required
    def pending_leave():
        try:
            applications = container.leave_service.list_pending(UserContext.from_session(session))
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify({"applications": [a.to_dict() for a in applications]})

    @app.route("/api/leave/<int:leave_id>/<decision>", methods=["POST"], endpoint="decide_leave")
    @login_required
    def decide_leave(leave_id: int, decision: str):
        if decision not in ("approve", "reject"):
            return jsonify({"success": False, "message": "Unknown decision"}), 404
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            application = container.leave_service.decide(
                UserContext.from_session(session),
                leave_id,
                approve=decision == "approve",
                note=data.get("note", ""),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except Exception:
            app.logger.exception("leave decision failed for leave=%s", leave_id)
            return jsonify({"success": False, "message": "Failed to update leave application"}), 500
        return jsonify({"success": True, "application": application.to_dict()})
