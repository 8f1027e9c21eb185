from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalLevel, LeaveStatus


@dataclass(frozen=True)
class ApprovalStep:
    status: LeaveStatus = LeaveStatus.PENDING
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class LeaveApplication:
    """Leave request going through head-of-department, then admin approval."""

    leave_id: int
    user_id: int
    dept_id: Optional[int]
    reason: str
    starts_at: datetime
    ends_at: datetime
    status: LeaveStatus
    created_at: datetime
    hod: ApprovalStep = field(default_factory=ApprovalStep)
    ceo: ApprovalStep = field(default_factory=ApprovalStep)
    full_name: Optional[str] = None

    @property
    def awaiting(self) -> Optional[ApprovalLevel]:
        """The level that has to decide next, None once the application is closed."""
        if self.status != LeaveStatus.PENDING:
            return None
        if self.hod.status == LeaveStatus.PENDING:
            return ApprovalLevel.HOD
        if self.ceo.status == LeaveStatus.PENDING:
            return ApprovalLevel.CEO
        return None

    def to_dict(self) -> dict:
        def step(s: ApprovalStep) -> dict:
            return {
                "status": s.status.value,
                "by": s.decided_by,
                "at": s.decided_at.strftime("%Y-%m-%d %H:%M") if s.decided_at else None,
                "note": s.note,
            }

        return {
            "leave_id": self.leave_id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "dept_id": self.dept_id,
            "reason": self.reason,
            "from": self.starts_at.strftime("%Y-%m-%d %H:%M"),
            "to": self.ends_at.strftime("%Y-%m-%d %H:%M"),
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "approval": {"hod": step(self.hod), "ceo": step(self.ceo)},
        }
