from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalLevel, LeaveStatus
from .model import LeaveApplication


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        dept_id: Optional[int],
        reason: str,
        starts_at: datetime,
        ends_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, leave_id: int) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def list_applications(
        self,
        *,
        user_id: Optional[int] = None,
        dept_id: Optional[int] = None,
        awaiting: Optional[ApprovalLevel] = None,
        limit: int = 200,
    ) -> Sequence[LeaveApplication]:
        """Newest first. `awaiting` keeps only applications that level has to decide."""

        raise NotImplementedError

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
        """Store one approval step, only while that step is still the one awaited.

        Returns False when someone else decided first.
        """

        raise NotImplementedError
