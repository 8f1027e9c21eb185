from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    dept_id: Optional[int]
    designation: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Department:
    dept_id: int
    dept_name: str


@dataclass(frozen=True)
class UserContext:
    """Caller identity passed explicitly into every service call."""

    user_id: int
    full_name: str
    role: Role
    dept_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_department_admin(self) -> bool:
        return self.role == Role.DEPARTMENT_ADMIN

    @classmethod
    def from_user(cls, user: User) -> "UserContext":
        return cls(user_id=user.user_id, full_name=user.full_name, role=user.role, dept_id=user.dept_id)

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.full_name,
            "role": self.role.value,
            "dept_id": self.dept_id,
        }

    @classmethod
    def from_session(cls, session) -> "UserContext":
        dept_id = session.get("dept_id")
        return cls(
            user_id=int(session["user_id"]),
            full_name=session.get("name") or "",
            role=Role(session.get("role")),
            dept_id=int(dept_id) if dept_id else None,
        )


def department_scope(user: UserContext, dept_id: Optional[int] = None) -> int:
    """Department a caller may look at.

    Admins may pick any department (default: their own); heads of department
    only ever get their own. Staff have no department views.
    """
    if user.is_admin:
        target = dept_id or user.dept_id
    elif user.is_department_admin:
        target = user.dept_id
    else:
        raise AuthorizationError("Only heads of department can view department records")
    if not target:
        raise AuthorizationError("No department assigned")
    return int(target)
