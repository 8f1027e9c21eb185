from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import UserContext
from ..container import Container
from .model import AMOUNT_FIELDS


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

    def _optional_int(name: str):
        raw = request.args.get(name)
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            raise ValidationError(f"{name} must be a number") from None

    @app.route("/admin/salaries", methods=["POST"], endpoint="admin_save_salary")
    @admin_required
    def admin_save_salary():
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            payslip = container.payroll_service.save_salary(
                UserContext.from_session(session),
                employee_id=int(data.get("employee_id") or 0),
                month=data.get("month", ""),
                year=str(data.get("year", "")),
                bank_name=data.get("bank_name", ""),
                bank_account=data.get("bank_account", ""),
                ifsc_code=data.get("ifsc_code", ""),
                pan=data.get("pan", ""),
                amounts={name: data.get(name) for name in AMOUNT_FIELDS},
            )
        except (ValueError, TypeError):
            return jsonify({"success": False, "message": "employee_id must be a number"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except Exception:
            app.logger.exception("saving salary failed")
            return jsonify({"success": False, "message": "Failed to save salary"}), 500
        return jsonify({"success": True, "payslip": payslip.to_dict()})

    @app.route("/api/payslips", methods=["GET"], endpoint="my_payslips")
    @login_required
    def my_payslips():
        payslips = container.payroll_service.list_mine(UserContext.from_session(session))
        return jsonify({"payslips": [p.to_dict() for p in payslips]})

    @app.route("/api/payslip", methods=["GET"], endpoint="payslip")
    @login_required
    def payslip():
        try:
            result = container.payroll_service.get_payslip(
                UserContext.from_session(session),
                month=request.args.get("month", ""),
                year=request.args.get("year", ""),
                employee_id=_optional_int("user_id"),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify({"payslip": result.to_dict()})

    @app.route("/api/department/salaries", methods=["GET"], endpoint="department_salaries")
    @login_required
    def department_salaries():
        try:
            payslips = container.payroll_service.list_for_department(
                UserContext.from_session(session),
                month=request.args.get("month", ""),
                year=request.args.get("year", ""),
                dept_id=_optional_int("dept_id"),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify({"payslips": [p.to_dict() for p in payslips]})
