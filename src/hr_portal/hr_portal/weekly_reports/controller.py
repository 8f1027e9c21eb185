from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import UserContext
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/weekly-reports", methods=["POST"], endpoint="submit_weekly_report")
    @login_required
    def submit_weekly_report():
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            report_id = container.weekly_report_service.submit(UserContext.from_session(session), data.get("report", ""))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            app.logger.exception("weekly report submission failed")
            return jsonify({"success": False, "message": "Failed to submit weekly report"}), 500
        return jsonify({"success": True, "report_id": report_id, "message": "Weekly report submitted successfully"}), 201

    @app.route("/api/weekly-reports", methods=["GET"], endpoint="my_weekly_reports")
    @login_required
    def my_weekly_reports():
        reports = container.weekly_report_service.list_mine(UserContext.from_session(session))
        return jsonify(
            {
                "reports": [
                    {
                        "report_id": r.report_id,
                        "report": r.report,
                        "week_ending": r.week_ending.strftime("%Y-%m-%d"),
                        "submitted_at": r.submitted_at.strftime("%Y-%m-%d %H:%M"),
                        "month": r.month,
                        "year": r.year,
                    }
                    for r in reports
                ]
            }
        )

    @app.route("/api/weekly-reports/department", methods=["GET"], endpoint="department_weekly_reports")
    @login_required
    def department_weekly_reports():
        dept_id = request.args.get("dept_id")
        try:
            rows = container.weekly_report_service.list_for_department(
                UserContext.from_session(session),
                dept_id=int(dept_id) if dept_id else None,
            )
        except ValueError:
            return jsonify({"success": False, "message": "dept_id must be a number"}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify({"reports": list(rows)})
