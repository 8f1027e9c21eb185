from __future__ import annotations

from datetime import timedelta
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import UserContext
from ..container import Container


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

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

    def _form() -> dict:
        return request.get_json(silent=True) or request.form.to_dict()

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = _form()
        try:
            user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except Exception:
            app.logger.exception("sign-in failed")
            return jsonify({"success": False, "message": "System error while signing in"}), 500

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session.update(user.to_session())
        return jsonify({"success": True, "user": user.to_session()})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Signed out"})

    @app.route("/me/password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = _form()
        try:
            container.auth_service.change_password(
                UserContext.from_session(session),
                current_password=data.get("current_password", ""),
                new_password=data.get("new_password", ""),
            )
        except AuthenticationError as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return jsonify({"success": True, "message": "Password updated"})

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        return jsonify(
            {
                "users": list(container.user_service.list_admin_view()),
                "departments": [
                    {"dept_id": d.dept_id, "dept_name": d.dept_name} for d in container.user_service.list_departments()
                ],
            }
        )

    @app.route("/admin/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        data = _form()
        try:
            try:
                role = Role(data.get("role", Role.STAFF.value))
            except ValueError:
                raise ValidationError("Invalid account type")

            user_id = container.user_service.create_account(
                current_role=Role(session.get("role")),
                full_name=data.get("full_name", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
                role=role,
                dept_id=int(data.get("dept_id") or 0) or None,
                designation=data.get("designation"),
            )
        except (ValidationError, AuthorizationError) as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except ValueError:
            return jsonify({"success": False, "message": "dept_id must be a number"}), 400
        except Exception:
            app.logger.exception("creating account failed")
            return jsonify({"success": False, "message": "System error while adding employee"}), 500
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/admin/users/<int:user_id>/deactivate", methods=["POST"], endpoint="deactivate_user")
    @admin_required
    def deactivate_user(user_id: int):
        try:
            container.user_service.deactivate_user(current_role=Role(session.get("role")), user_id=user_id)
        except (ValidationError, AuthorizationError) as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return jsonify({"success": True, "message": "Employee deactivated"})

    @app.route("/api/department/users", methods=["GET"], endpoint="department_users")
    @login_required
    def department_users():
        dept_id = request.args.get("dept_id")
        try:
            members = container.user_service.list_department_members(
                UserContext.from_session(session),
                dept_id=int(dept_id) if dept_id else None,
            )
        except ValueError:
            return jsonify({"success": False, "message": "dept_id must be a number"}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        return jsonify({"users": members})
