from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import User, UserContext, department_scope
from .repository import UserRepository


def _password_matches(user: User, password: str) -> bool:
    try:
        return check_password_hash(user.password_hash, password)
    except (TypeError, ValueError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: sign in and password changes."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> UserContext:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")
        if not _password_matches(user, password):
            raise AuthenticationError("Invalid email or password")
        return UserContext.from_user(user)

    def change_password(self, user: UserContext, *, current_password: str, new_password: str) -> None:
        """Re-authenticate with the current password, then store the new one."""
        account = self._users.get_by_id(user.user_id)
        if not account or not account.is_active:
            raise AuthenticationError("Account not found")
        if not _password_matches(account, current_password):
            raise AuthenticationError("Current password is incorrect")

        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if new_password == current_password:
            raise ValidationError("New password must differ from the current one")

        if not self._users.update_password_hash(account.user_id, generate_password_hash(new_password)):
            raise ValidationError("Password update failed")


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(
        self,
        *,
        current_role: Role,
        full_name: str,
        email: str,
        password: str,
        role: Role,
        dept_id: Optional[int],
        designation: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        full_name = require_non_empty(full_name, "Full name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        return self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            dept_id=int(dept_id) if dept_id else None,
            designation=(designation or "").strip() or None,
        )

    def list_admin_view(self):
        return self._users.list_admin_view()

    def list_departments(self):
        return self._users.list_departments()

    def list_department_members(self, user: UserContext, *, dept_id: Optional[int] = None) -> list[dict]:
        members = self._users.list_department_members(department_scope(user, dept_id))
        return [
            {
                "user_id": u.user_id,
                "full_name": u.full_name,
                "email": u.email,
                "role": u.role.value,
                "designation": u.designation or "-",
            }
            for u in members
        ]

    def deactivate_user(self, *, current_role: Role, user_id: int) -> None:
        """Accounts are never deleted; their attendance rows stay as they are."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("Employee does not exist")
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deactivated")

        if not self._users.set_active(user_id, is_active=False):
            raise ValidationError("Deactivation failed")
