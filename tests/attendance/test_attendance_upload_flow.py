from datetime import datetime

import pytest

from src.hr_portal.hr_portal.attendance.service import AttendanceService
from src.hr_portal.hr_portal.core.enums import AttendanceAction, AttendanceState, LocationErrorKind, Role
from src.hr_portal.hr_portal.core.exceptions import (
    AuthorizationError,
    DuplicateAttendanceError,
    LocationError,
    OutOfRangeError,
    ValidationError,
)
from src.hr_portal.hr_portal.geo.model import GeoPoint
from src.hr_portal.hr_portal.geo.provider import RequestLocationProvider, StaticLocationProvider
from src.hr_portal.hr_portal.holidays.calendar import HolidayCalendar

HEAD_OFFICE = "AP MARITIME BOARD HEAD OFFICE"
NEAR_HEAD = GeoPoint(16.4228036 + 0.001, 80.562812)  # ~111 m
FAR_FROM_HEAD = GeoPoint(16.4228036 + 600 / 111000, 80.562812)  # ~600 m
MORNING = datetime(2025, 10, 15, 9, 0)
EVENING = datetime(2025, 10, 15, 18, 0)


@pytest.fixture
def service(attendance_repo, users_repo):
    return AttendanceService(attendance_repo, users_repo, calendar=HolidayCalendar([]))


def test_start_near_office_creates_record(service, attendance_repo, staff):
    outcome = service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)

    assert outcome.office.name == HEAD_OFFICE
    assert outcome.distance_meters == pytest.approx(111, abs=1)
    assert outcome.message == f"Attendance marked at {HEAD_OFFICE}"
    stored = attendance_repo.get_for_user_and_date(1, MORNING.date())
    assert stored.state == AttendanceState.STARTED
    assert stored.start_time == MORNING
    assert stored.location.name == HEAD_OFFICE
    assert outcome.record.attendance_id == stored.attendance_id


def test_end_too_far_is_rejected_and_record_unchanged(service, attendance_repo, staff):
    service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)
    before = attendance_repo.get_for_user_and_date(1, MORNING.date())

    with pytest.raises(OutOfRangeError) as exc:
        service.submit(staff, "end", location_provider=StaticLocationProvider(FAR_FROM_HEAD), now=EVENING)

    assert "Nearest office is 600m away." in str(exc.value)
    assert attendance_repo.get_for_user_and_date(1, MORNING.date()) == before


def test_start_end_full_day(service, attendance_repo, staff):
    service.submit(staff, AttendanceAction.START, location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)
    outcome = service.submit(staff, AttendanceAction.END, location_provider=StaticLocationProvider(NEAR_HEAD), now=EVENING)

    assert outcome.record.state == AttendanceState.COMPLETED
    assert outcome.record.start_time == MORNING
    assert outcome.record.end_time == EVENING
    assert attendance_repo.creates == 1
    assert attendance_repo.updates == 1


def test_ooo_then_start_is_rejected(service, attendance_repo, staff):
    outcome = service.submit(staff, "ooo", now=MORNING)
    assert outcome.message == "Out of office status marked successfully"
    assert outcome.office is None

    with pytest.raises(ValidationError) as exc:
        service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=EVENING)

    assert str(exc.value) == "You are marked out of office today"
    assert attendance_repo.get_for_user_and_date(1, MORNING.date()).state == AttendanceState.OUT_OF_OFFICE


def test_ooo_does_not_need_location(service, staff):
    outcome = service.submit(staff, "ooo", now=MORNING)

    assert outcome.record.state == AttendanceState.OUT_OF_OFFICE


@pytest.mark.parametrize("code", [1, 2, 3])
def test_location_failures_write_nothing(service, attendance_repo, staff, code):
    with pytest.raises(LocationError):
        service.submit(staff, "start", location_provider=RequestLocationProvider({"error": code}), now=MORNING)

    assert attendance_repo.get_for_user_and_date(1, MORNING.date()) is None


def test_permission_denied_kind(service, staff):
    with pytest.raises(LocationError) as exc:
        service.submit(staff, "start", location_provider=RequestLocationProvider({"error": 1}), now=MORNING)

    assert exc.value.kind == LocationErrorKind.PERMISSION_DENIED


def test_outside_region_writes_nothing(service, attendance_repo, staff):
    with pytest.raises(OutOfRangeError):
        service.submit(staff, "start", location_provider=StaticLocationProvider(GeoPoint(20.0, 80.0)), now=MORNING)

    assert attendance_repo.get_for_user_and_date(1, MORNING.date()) is None


def test_start_without_location_provider_is_rejected(service, staff):
    with pytest.raises(ValidationError):
        service.submit(staff, "start", now=MORNING)


def test_unknown_action_is_rejected(service, staff):
    with pytest.raises(ValidationError):
        service.submit(staff, "lunch", now=MORNING)


def test_inactive_user_cannot_mark_attendance(attendance_repo, users_repo, staff):
    users_repo.set_active(1, is_active=False)
    service = AttendanceService(attendance_repo, users_repo)

    with pytest.raises(AuthorizationError):
        service.submit(staff, "ooo", now=MORNING)


def test_unknown_user_cannot_mark_attendance(attendance_repo, users_repo):
    from src.hr_portal.hr_portal.users.model import UserContext

    ghost = UserContext(user_id=404, full_name="Ghost", role=Role.STAFF)
    service = AttendanceService(attendance_repo, users_repo)

    with pytest.raises(ValidationError):
        service.submit(ghost, "ooo", now=MORNING)


def test_records_are_per_user(service, attendance_repo, staff, other_staff):
    service.submit(staff, "ooo", now=MORNING)
    service.submit(other_staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)

    assert attendance_repo.get_for_user_and_date(1, MORNING.date()).state == AttendanceState.OUT_OF_OFFICE
    assert attendance_repo.get_for_user_and_date(2, MORNING.date()).state == AttendanceState.STARTED


def test_holiday_advisory_never_blocks(attendance_repo, users_repo, staff):
    calendar = HolidayCalendar.from_dict({"publicHolidays": [{"date": "2025-10-15", "name": "Founders Day"}]})
    service = AttendanceService(attendance_repo, users_repo, calendar=calendar)

    outcome = service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)

    assert outcome.advisory.kind == "Public Holiday"
    assert outcome.advisory.message == "Today is a Public Holiday: Founders Day"
    assert outcome.record.state == AttendanceState.STARTED


class _RacingAttendance:
    """Another request inserts today's row between our read and our insert."""

    def __init__(self, inner, winner):
        self._inner = inner
        self._winner = winner
        self._raced = False

    def get_for_user_and_date(self, user_id, work_date):
        return self._inner.get_for_user_and_date(user_id, work_date)

    def create_record(self, record):
        if not self._raced:
            self._raced = True
            self._inner.put(self._winner)
            raise DuplicateAttendanceError("uq_attendance_user_day")
        return self._inner.create_record(record)

    def update_record(self, record, *, expected_state):
        return self._inner.update_record(record, expected_state=expected_state)


def test_lost_start_race_is_reevaluated(attendance_repo, users_repo, staff):
    from src.hr_portal.hr_portal.attendance.state_machine import transition

    winner = transition(None, AttendanceAction.START, user_id=1, now=MORNING, location=None).record
    service = AttendanceService(_RacingAttendance(attendance_repo, winner), users_repo)

    with pytest.raises(ValidationError) as exc:
        service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)

    assert str(exc.value) == "Work has already been started today"
    assert attendance_repo.creates == 0


def test_lost_race_then_end_applies_on_fresh_state(attendance_repo, users_repo, staff):
    from src.hr_portal.hr_portal.attendance.state_machine import transition

    winner = transition(None, AttendanceAction.START, user_id=1, now=MORNING, location=None).record
    racing = _RacingAttendance(attendance_repo, winner)
    service = AttendanceService(racing, users_repo)

    # ooo loses the race to a start and is re-evaluated against STARTED
    with pytest.raises(ValidationError) as exc:
        service.submit(staff, "ooo", now=MORNING)
    assert "cannot be marked out of office" in str(exc.value)

    outcome = service.submit(staff, "end", location_provider=StaticLocationProvider(NEAR_HEAD), now=EVENING)
    assert outcome.record.state == AttendanceState.COMPLETED
    assert outcome.record.start_time == MORNING


class _StaleUpdates:
    def __init__(self, inner):
        self._inner = inner

    def get_for_user_and_date(self, user_id, work_date):
        return self._inner.get_for_user_and_date(user_id, work_date)

    def create_record(self, record):
        return self._inner.create_record(record)

    def update_record(self, record, *, expected_state):
        return False


def test_repeated_conflicts_give_up(attendance_repo, users_repo, staff):
    service = AttendanceService(attendance_repo, users_repo)
    service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)
    stuck = AttendanceService(_StaleUpdates(attendance_repo), users_repo)

    with pytest.raises(ValidationError) as exc:
        stuck.submit(staff, "end", location_provider=StaticLocationProvider(NEAR_HEAD), now=EVENING)

    assert "refresh and try again" in str(exc.value)
    assert attendance_repo.get_for_user_and_date(1, MORNING.date()).end_time is None


def test_history_and_month_listing(service, staff):
    service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)
    service.submit(staff, "ooo", now=datetime(2025, 9, 30, 9, 0))

    history = service.get_history_ui(1)
    october = service.list_month(1, month=10, year=2025)

    assert [h["status"] for h in history] == ["Half Day Present", "Out of Office"]
    assert history[0]["location"] == HEAD_OFFICE
    assert len(october) == 1
    with pytest.raises(ValidationError):
        service.list_month(1, month=13, year=2025)


def test_to_api_uses_epoch_seconds(service, staff):
    outcome = service.submit(staff, "start", location_provider=StaticLocationProvider(NEAR_HEAD), now=MORNING)

    payload = AttendanceService.to_api(outcome.record)

    assert payload["state"] == "STARTED"
    assert payload["startTime"] == {"seconds": int(MORNING.timestamp())}
    assert payload["endTime"] is None
    assert payload["location"]["name"] == HEAD_OFFICE


def test_history_defaults_to_fifteen_rows(attendance_repo, users_repo):
    class _Recording(type(attendance_repo)):
        def get_recent_for_user(self, user_id, limit):
            self.limit = limit
            return super().get_recent_for_user(user_id, limit)

    repo = _Recording()
    AttendanceService(repo, users_repo).get_history_ui(1)

    assert repo.limit == 15
