from __future__ import annotations

import csv
import io
from datetime import date, timedelta
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import AttendanceAction, Role
from ..core.exceptions import AuthorizationError, LocationError, OutOfRangeError, ValidationError
from ..geo.provider import RequestLocationProvider
from ..geo.resolver import format_distance
from ..reports.service import CSV_FIELDS
from ..users.model import UserContext, department_scope
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            if session.get("role") != Role.ADMIN.value:
                return jsonify({"success": False, "message": "You do not have permission"}), 403
            return view(*args, **kwargs)

        return wrapper

    def _advisory_json(advisory):
        if not advisory:
            return None
        return {"type": advisory.kind, "name": advisory.name, "message": advisory.message}

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        today = now_local().date()
        user_id = int(session["user_id"])
        svc = container.attendance_service
        record = svc.get_today_record(user_id, today)
        return jsonify(
            {
                "date": today.isoformat(),
                "state": svc.get_today_state(user_id, today).value,
                "status": svc.status_display(record),
                "record": svc.to_api(record),
                "advisory": _advisory_json(svc.today_advisory(today)),
            }
        )

    @app.route("/api/attendance/<action>", methods=["POST"], endpoint="attendance_submit")
    @login_required
    def attendance_submit(action: str):
        user = UserContext.from_session(session)
        payload = request.get_json(silent=True) or {}

        try:
            action_enum = AttendanceAction(action)
        except ValueError:
            return jsonify({"success": False, "message": f"Unknown attendance action: {action}"}), 404

        provider = RequestLocationProvider(payload) if action_enum.needs_location else None

        try:
            outcome = container.attendance_service.submit(user, action_enum, location_provider=provider)
        except LocationError as e:
            return jsonify({"success": False, "error": "location", "reason": e.kind.value, "message": str(e)}), 400
        except OutOfRangeError as e:
            return (
                jsonify(
                    {
                        "success": False,
                        "error": "out_of_range",
                        "message": str(e),
                        "nearest": format_distance(e.distance_meters),
                    }
                ),
                400,
            )
        except ValidationError as e:
            return jsonify({"success": False, "error": "validation", "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "error": "forbidden", "message": str(e)}), 403
        except Exception:
            app.logger.exception("attendance %s failed for user=%s", action, user.user_id)
            return jsonify({"success": False, "message": "System error while marking attendance"}), 500

        return jsonify(
            {
                "success": True,
                "action": outcome.action.value,
                "message": outcome.message,
                "office": outcome.office.name if outcome.office else None,
                "distance": format_distance(outcome.distance_meters) if outcome.distance_meters is not None else None,
                "record": container.attendance_service.to_api(outcome.record),
                "advisory": _advisory_json(outcome.advisory),
            }
        )

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        user_id = int(session["user_id"])
        svc = container.attendance_service
        month = request.args.get("month")
        year = request.args.get("year")

        if not month and not year:
            return jsonify({"rows": svc.get_history_ui(user_id)})

        today = now_local().date()
        try:
            records = svc.list_month(user_id, month=int(month or today.month), year=int(year or today.year))
        except ValueError:
            return jsonify({"success": False, "message": "month/year must be numbers"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return jsonify({"rows": [svc.to_ui(r) for r in records]})

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays")
    @login_required
    def holidays():
        try:
            year = int(request.args.get("year") or now_local().year)
        except ValueError:
            return jsonify({"success": False, "message": "year must be a number"}), 400
        return jsonify(
            {
                "year": year,
                "holidays": [
                    {"date": h.date.isoformat(), "name": h.name, "category": h.category.value}
                    for h in container.holiday_calendar.list_year(year)
                ],
            }
        )

    def _report_range() -> tuple[date, date]:
        today = now_local().date()
        start_s = request.args.get("start") or (today - timedelta(days=DEFAULT_REPORT_DAYS)).strftime("%Y-%m-%d")
        end_s = request.args.get("end") or today.strftime("%Y-%m-%d")
        try:
            return parse_iso_date(start_s), parse_iso_date(end_s)
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD")

    def _report_filters() -> dict:
        user_id = request.args.get("user_id")
        dept_id = request.args.get("dept_id")
        try:
            return {
                "user_id": int(user_id) if user_id else None,
                "dept_id": int(dept_id) if dept_id else None,
            }
        except ValueError:
            raise ValidationError("user_id/dept_id must be numbers")

    @app.route("/admin/report", methods=["GET"], endpoint="admin_report")
    @admin_required
    def admin_report():
        try:
            start, end = _report_range()
            data = container.report_service.build_attendance_report(start=start, end=end, **_report_filters())
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return jsonify(
            {
                "start": start.strftime("%Y-%m-%d"),
                "end": end.strftime("%Y-%m-%d"),
                "rows": data.rows,
                "summary": data.summary,
            }
        )

    @app.route("/admin/report.csv", methods=["GET"], endpoint="admin_report_csv")
    @admin_required
    def admin_report_csv():
        try:
            start, end = _report_range()
            data = container.report_service.build_attendance_report(start=start, end=end, **_report_filters())
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = f"attendance_report_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/department/attendance", methods=["GET"], endpoint="department_attendance")
    @login_required
    def department_attendance():
        """Heads of department: their department's rows and summary."""
        try:
            start, end = _report_range()
            filters = _report_filters()
            dept_id = department_scope(UserContext.from_session(session), filters["dept_id"])
            data = container.report_service.build_attendance_report(
                start=start, end=end, user_id=filters["user_id"], dept_id=dept_id
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify(
            {
                "dept_id": dept_id,
                "start": start.strftime("%Y-%m-%d"),
                "end": end.strftime("%Y-%m-%d"),
                "rows": data.rows,
                "summary": data.summary,
            }
        )
