from datetime import datetime

import pytest

from src.hr_portal.hr_portal.core.enums import ApprovalLevel, LeaveStatus, Role
from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, ValidationError
from src.hr_portal.hr_portal.leave.service import LeaveService, count_by_status
from src.hr_portal.hr_portal.users.model import UserContext

FROM = datetime(2025, 10, 20, 9, 0)
TO = datetime(2025, 10, 22, 18, 0)


@pytest.fixture
def service(leave_repo):
    return LeaveService(leave_repo)


def _file(service, user, reason="Family function"):
    return service.submit(user, reason=reason, starts_at=FROM, ends_at=TO)


def test_submit_starts_pending_at_both_levels(service, leave_repo, staff):
    leave_id = _file(service, staff, reason="  Family function  ")

    application = leave_repo.get(leave_id)
    assert application.reason == "Family function"
    assert application.dept_id == 1
    assert application.status == LeaveStatus.PENDING
    assert application.awaiting == ApprovalLevel.HOD


@pytest.mark.parametrize(
    "reason,starts_at,ends_at",
    [
        ("   ", FROM, TO),
        ("Trip", TO, FROM),
    ],
)
def test_submit_rejects_bad_input(service, staff, reason, starts_at, ends_at):
    with pytest.raises(ValidationError):
        service.submit(staff, reason=reason, starts_at=starts_at, ends_at=ends_at)


def test_admins_do_not_file_leave(service, admin):
    with pytest.raises(AuthorizationError):
        _file(service, admin)


def test_full_approval_goes_hod_then_admin(service, staff, head, admin):
    leave_id = _file(service, staff)

    after_hod = service.decide(head, leave_id, approve=True, note="Covered by User 2")
    assert after_hod.status == LeaveStatus.PENDING
    assert after_hod.hod.status == LeaveStatus.APPROVED
    assert after_hod.hod.decided_by == 5
    assert after_hod.awaiting == ApprovalLevel.CEO

    final = service.decide(admin, leave_id, approve=True, note="OK")
    assert final.status == LeaveStatus.APPROVED
    assert final.ceo.note == "OK"
    assert final.awaiting is None


def test_hod_rejection_closes_application(service, staff, head, admin):
    leave_id = _file(service, staff)

    rejected = service.decide(head, leave_id, approve=False, note="Inspection week")

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.ceo.status == LeaveStatus.PENDING
    with pytest.raises(ValidationError):
        service.decide(admin, leave_id, approve=True, note="Overrule")


def test_admin_rejection_after_hod_approval(service, staff, head, admin):
    leave_id = _file(service, staff)
    service.decide(head, leave_id, approve=True, note="Fine by me")

    final = service.decide(admin, leave_id, approve=False, note="Budget freeze")

    assert final.status == LeaveStatus.REJECTED
    assert final.hod.status == LeaveStatus.APPROVED


def test_admin_waits_for_hod(service, staff, admin):
    leave_id = _file(service, staff)

    with pytest.raises(ValidationError) as exc:
        service.decide(admin, leave_id, approve=True, note="Early")

    assert "Head of department" in str(exc.value)


def test_hod_cannot_decide_twice(service, staff, head):
    leave_id = _file(service, staff)
    service.decide(head, leave_id, approve=True, note="Yes")

    with pytest.raises(ValidationError):
        service.decide(head, leave_id, approve=False, note="Changed my mind")


def test_note_is_required(service, staff, head):
    leave_id = _file(service, staff)

    with pytest.raises(ValidationError) as exc:
        service.decide(head, leave_id, approve=True, note="  ")

    assert str(exc.value) == "Note is required"


def test_staff_cannot_decide(service, staff, other_staff):
    leave_id = _file(service, staff)

    with pytest.raises(AuthorizationError):
        service.decide(other_staff, leave_id, approve=True, note="Sure")


def test_hod_of_other_department_cannot_decide(service, staff):
    leave_id = _file(service, staff)
    outsider = UserContext(user_id=6, full_name="Other Head", role=Role.DEPARTMENT_ADMIN, dept_id=2)

    with pytest.raises(AuthorizationError):
        service.decide(outsider, leave_id, approve=True, note="Sure")


def test_unknown_application(service, head):
    with pytest.raises(ValidationError):
        service.decide(head, 404, approve=True, note="?")


def test_lost_decision_race_is_reported(leave_repo, staff, head):
    class _AlreadyDecided(type(leave_repo)):
        def record_decision(self, *args, **kwargs):
            return False

    racing = _AlreadyDecided()
    service = LeaveService(racing)
    leave_id = _file(service, staff)

    with pytest.raises(ValidationError):
        service.decide(head, leave_id, approve=True, note="Yes")


def test_listing_follows_role(service, staff, other_staff, head, admin):
    outsider = UserContext(user_id=3, full_name="User 3", role=Role.STAFF, dept_id=2)
    mine = _file(service, staff)
    theirs = _file(service, other_staff)
    elsewhere = _file(service, outsider)

    assert [a.leave_id for a in service.list_visible(staff)] == [mine]
    assert [a.leave_id for a in service.list_visible(head)] == [theirs, mine]
    assert [a.leave_id for a in service.list_visible(admin)] == [elsewhere, theirs, mine]


def test_pending_queues(service, staff, other_staff, head, admin):
    first = _file(service, staff)
    second = _file(service, other_staff)
    service.decide(head, first, approve=True, note="Yes")

    assert [a.leave_id for a in service.list_pending(head)] == [second]
    assert [a.leave_id for a in service.list_pending(admin)] == [first]
    with pytest.raises(AuthorizationError):
        service.list_pending(staff)


def test_count_by_status(service, staff, other_staff, head):
    first = _file(service, staff)
    _file(service, other_staff)
    service.decide(head, first, approve=False, note="No")

    assert count_by_status(service.list_visible(head)) == {"pending": 1, "approved": 0, "rejected": 1}
