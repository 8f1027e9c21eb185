from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import Database
from .model import Department, User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, password_hash, role, dept_id, designation, is_active"


def _user_from_row(row: dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        dept_id=row.get("dept_id"),
        designation=row.get("designation"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, db: Database):
        self._db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._db.cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = cur.fetchone()
            return _user_from_row(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._db.cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = cur.fetchone()
            return _user_from_row(row) if row else None

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        dept_id: Optional[int],
        designation: Optional[str] = None,
    ) -> int:
        with self._db.cursor() as cur:
            cur.execute(
                """
                INSERT INTO users(full_name, email, password_hash, role, dept_id, designation, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (full_name, email, password_hash, role.value, dept_id, designation),
            )
            return int(cur.lastrowid)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with self._db.cursor() as cur:
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, user_id))
            return cur.rowcount > 0

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        with self._db.cursor() as cur:
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            return cur.rowcount > 0

    def list_admin_view(self) -> Sequence[dict]:
        with self._db.cursor() as cur:
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.email, u.role, u.designation, u.is_active,
                       d.dept_name
                FROM users u
                LEFT JOIN departments d ON d.dept_id = u.dept_id
                ORDER BY u.user_id DESC
                """
            )
            rows = cur.fetchall()
            return [
                {
                    "user_id": r["user_id"],
                    "full_name": r["full_name"],
                    "email": r["email"],
                    "role": r["role"],
                    "designation": r.get("designation") or "-",
                    "dept_name": r.get("dept_name") or "-",
                    "is_active": bool(r.get("is_active", True)),
                }
                for r in rows
            ]

    def list_departments(self) -> Sequence[Department]:
        with self._db.cursor() as cur:
            cur.execute("SELECT dept_id, dept_name FROM departments ORDER BY dept_name")
            return [Department(dept_id=int(r["dept_id"]), dept_name=r["dept_name"]) for r in cur.fetchall()]

    def list_department_members(self, dept_id: int) -> Sequence[User]:
        with self._db.cursor() as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE dept_id=%s AND is_active=1 ORDER BY full_name",
                (int(dept_id),),
            )
            return [_user_from_row(r) for r in cur.fetchall()]
