from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import ApprovalLevel, LeaveStatus
from ..database.connection import Database
from .model import ApprovalStep, LeaveApplication
from .repository import LeaveRepository

_COLUMNS = """
    la.leave_id, la.user_id, la.dept_id, la.reason, la.starts_at, la.ends_at, la.status, la.created_at,
    la.hod_status, la.hod_by, la.hod_at, la.hod_note,
    la.ceo_status, la.ceo_by, la.ceo_at, la.ceo_note,
    u.full_name
"""

# which rows each level may act on
_AWAITING = {
    ApprovalLevel.HOD: "la.status='pending' AND la.hod_status='pending'",
    ApprovalLevel.CEO: "la.status='pending' AND la.hod_status='approved' AND la.ceo_status='pending'",
}


def _step(r: dict[str, Any], prefix: str) -> ApprovalStep:
    by = r.get(f"{prefix}_by")
    return ApprovalStep(
        status=LeaveStatus(r[f"{prefix}_status"]),
        decided_by=int(by) if by is not None else None,
        decided_at=r.get(f"{prefix}_at"),
        note=r.get(f"{prefix}_note"),
    )


def _leave_from_row(r: dict[str, Any]) -> LeaveApplication:
    return LeaveApplication(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        dept_id=r.get("dept_id"),
        reason=r["reason"],
        starts_at=r["starts_at"],
        ends_at=r["ends_at"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        hod=_step(r, "hod"),
        ceo=_step(r, "ceo"),
        full_name=r.get("full_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, db: Database):
        self._db = db

    def create(
        self,
        *,
        user_id: int,
        dept_id: Optional[int],
        reason: str,
        starts_at: datetime,
        ends_at: datetime,
    ) -> int:
        with self._db.cursor() as cur:
            cur.execute(
                """
                INSERT INTO leave_applications(user_id, dept_id, reason, starts_at, ends_at, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), dept_id, reason, starts_at, ends_at, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, leave_id: int) -> Optional[LeaveApplication]:
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_applications la
                JOIN users u ON u.user_id = la.user_id
                WHERE la.leave_id=%s
                """,
                (int(leave_id),),
            )
            r = cur.fetchone()
            return _leave_from_row(r) if r else None

    def list_applications(
        self,
        *,
        user_id: Optional[int] = None,
        dept_id: Optional[int] = None,
        awaiting: Optional[ApprovalLevel] = None,
        limit: int = 200,
    ) -> Sequence[LeaveApplication]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("la.user_id=%s")
            params.append(int(user_id))
        if dept_id is not None:
            clauses.append("la.dept_id=%s")
            params.append(int(dept_id))
        if awaiting is not None:
            clauses.append(_AWAITING[awaiting])

        where = " AND ".join(clauses)

        with self._db.cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_applications la
                JOIN users u ON u.user_id = la.user_id
                WHERE {where}
                ORDER BY la.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_leave_from_row(r) for r in cur.fetchall()]

    def record_decision(
        self,
        leave_id: int,
        *,
        level: ApprovalLevel,
        decision: LeaveStatus,
        decided_by: int,
        note: str,
        overall: LeaveStatus,
    ) -> bool:
        prefix = level.value
        guard = _AWAITING[level].replace("la.", "")
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                UPDATE leave_applications
                SET {prefix}_status=%s, {prefix}_by=%s, {prefix}_at=NOW(), {prefix}_note=%s, status=%s
                WHERE leave_id=%s AND {guard}
                """,
                (decision.value, int(decided_by), note, overall.value, int(leave_id)),
            )
            return cur.rowcount > 0
