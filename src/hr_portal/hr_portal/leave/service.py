from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.enums import ApprovalLevel, LeaveStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import UserContext
from .model import LeaveApplication
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Use case: leave applications approved by the head of department, then by an admin."""

    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def submit(self, user: UserContext, *, reason: str, starts_at: datetime, ends_at: datetime) -> int:
        if user.is_admin:
            raise AuthorizationError("Admins do not file leave applications")
        reason = require_non_empty(reason, "Reason")
        if ends_at < starts_at:
            raise ValidationError("Leave cannot end before it starts")

        leave_id = self._leaves.create(
            user_id=user.user_id,
            dept_id=user.dept_id,
            reason=reason,
            starts_at=starts_at,
            ends_at=ends_at,
        )
        logger.info("leave %s filed by user=%s", leave_id, user.user_id)
        return leave_id

    def _level_for(self, user: UserContext) -> ApprovalLevel:
        if user.is_admin:
            return ApprovalLevel.CEO
        if user.is_department_admin:
            return ApprovalLevel.HOD
        raise AuthorizationError("You do not have permission")

    def decide(self, user: UserContext, leave_id: int, *, approve: bool, note: str) -> LeaveApplication:
        level = self._level_for(user)
        note = require_non_empty(note, "Note")

        application = self._leaves.get(leave_id)
        if not application:
            raise ValidationError("Leave application does not exist")
        if level == ApprovalLevel.HOD and application.dept_id != user.dept_id:
            raise AuthorizationError("This application belongs to another department")

        awaiting = application.awaiting
        if awaiting is None:
            raise ValidationError("This application has already been decided")
        if awaiting != level:
            if level == ApprovalLevel.CEO:
                raise ValidationError("Head of department has not approved this application yet")
            raise ValidationError("This application has already been decided")

        decision = LeaveStatus.APPROVED if approve else LeaveStatus.REJECTED
        if decision == LeaveStatus.REJECTED:
            overall = LeaveStatus.REJECTED
        elif level == ApprovalLevel.CEO:
            overall = LeaveStatus.APPROVED
        else:
            overall = LeaveStatus.PENDING

        ok = self._leaves.record_decision(
            leave_id,
            level=level,
            decision=decision,
            decided_by=user.user_id,
            note=note,
            overall=overall,
        )
        if not ok:
            raise ValidationError("Leave application was decided meanwhile, please reload")

        logger.info("leave %s %s at %s by user=%s", leave_id, decision.value, level.value, user.user_id)
        return self._leaves.get(leave_id)

    def list_visible(self, user: UserContext) -> Sequence[LeaveApplication]:
        if user.is_admin:
            return self._leaves.list_applications()
        if user.is_department_admin:
            if not user.dept_id:
                raise AuthorizationError("No department assigned")
            return self._leaves.list_applications(dept_id=user.dept_id)
        return self._leaves.list_applications(user_id=user.user_id)

    def list_pending(self, user: UserContext) -> Sequence[LeaveApplication]:
        """Applications waiting for this caller's decision."""
        level = self._level_for(user)
        if level == ApprovalLevel.HOD:
            if not user.dept_id:
                raise AuthorizationError("No department assigned")
            return self._leaves.list_applications(dept_id=user.dept_id, awaiting=level)
        return self._leaves.list_applications(awaiting=level)


def count_by_status(applications: Sequence[LeaveApplication]) -> dict:
    counts = Counter(a.status.value for a in applications)
    return {s.value: counts.get(s.value, 0) for s in LeaveStatus}
