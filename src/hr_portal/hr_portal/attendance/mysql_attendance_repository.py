from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceState, AttendanceStatus
from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import Database
from ..geo.model import OfficeLocation
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, month, status, start_time, end_time,
    location_name, location_latitude, location_longitude, created_at
"""

# WHERE fragments matching each stored state (used for conditional updates)
_STATE_GUARDS = {
    AttendanceState.STARTED: "status='present' AND start_time IS NOT NULL AND end_time IS NULL",
    AttendanceState.COMPLETED: "status='present' AND end_time IS NOT NULL",
    AttendanceState.OUT_OF_OFFICE: "status='ooo'",
}


def _location_from_row(r: dict[str, Any]) -> Optional[OfficeLocation]:
    if not r.get("location_name"):
        return None
    return OfficeLocation(
        name=r["location_name"],
        latitude=float(r["location_latitude"]),
        longitude=float(r["location_longitude"]),
    )


def _record_from_row(r: dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        month=r["month"],
        status=AttendanceStatus(r["status"]),
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
        location=_location_from_row(r),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, db: Database):
        self._db = db

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_record_from_row(r) for r in cur.fetchall()]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (user_id, work_date),
            )
            r = cur.fetchone()
            return _record_from_row(r) if r else None

    def list_for_user_month(self, user_id: int, *, month: int, year: int) -> Sequence[AttendanceRecord]:
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND YEAR(work_date)=%s AND MONTH(work_date)=%s
                ORDER BY work_date DESC
                """,
                (user_id, int(year), int(month)),
            )
            return [_record_from_row(r) for r in cur.fetchall()]

    def create_record(self, record: AttendanceRecord) -> int:
        loc = record.location
        try:
            with self._db.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, month, status, start_time, end_time,
                        location_name, location_latitude, location_longitude, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.user_id,
                        record.work_date,
                        record.month,
                        record.status.value,
                        record.start_time,
                        record.end_time,
                        loc.name if loc else None,
                        loc.latitude if loc else None,
                        loc.longitude if loc else None,
                        record.created_at,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            # uq_attendance_user_day
            raise DuplicateAttendanceError(
                f"attendance already exists for user {record.user_id} on {record.work_date}"
            ) from e

    def update_record(self, record: AttendanceRecord, *, expected_state: AttendanceState) -> bool:
        guard = _STATE_GUARDS.get(expected_state)
        if guard is None:
            raise ValueError(f"cannot update a record expected in state {expected_state.value}")

        loc = record.location
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                UPDATE attendance_records
                SET status=%s, start_time=%s, end_time=%s,
                    location_name=%s, location_latitude=%s, location_longitude=%s
                WHERE attendance_id=%s AND {guard}
                """,
                (
                    record.status.value,
                    record.start_time,
                    record.end_time,
                    loc.name if loc else None,
                    loc.latitude if loc else None,
                    loc.longitude if loc else None,
                    int(record.attendance_id),
                ),
            )
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        dept_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if dept_id is not None:
            clauses.append("u.dept_id=%s")
            params.append(int(dept_id))
        if user_id is not None:
            clauses.append("u.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with self._db.cursor() as cur:
            cur.execute(
                f"""
                SELECT
                    u.user_id, u.full_name, u.email,
                    d.dept_name,
                    ar.work_date, ar.status, ar.start_time, ar.end_time, ar.location_name
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                LEFT JOIN departments d ON d.dept_id = u.dept_id
                WHERE {where}
                ORDER BY ar.work_date DESC, u.user_id ASC
                """,
                tuple(params),
            )
            rows = cur.fetchall()

            return [
                AttendanceReportRow(
                    user_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    email=r["email"],
                    dept_name=r.get("dept_name"),
                    work_date=r["work_date"],
                    status=AttendanceStatus(r["status"]),
                    start_time=r.get("start_time"),
                    end_time=r.get("end_time"),
                    location_name=r.get("location_name"),
                )
                for r in rows
            ]
