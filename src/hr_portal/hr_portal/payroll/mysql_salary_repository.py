from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..database.connection import Database
from .model import AMOUNT_FIELDS, SalaryRecord, salary_columns
from .repository import SalaryRepository

_SELECT = "SELECT s.*, u.full_name FROM salaries s JOIN users u ON u.user_id = s.user_id"

# month names sort alphabetically, so order by the calendar instead
_ORDER_BY_PERIOD = """
    ORDER BY s.year DESC,
    FIELD(s.month, 'January','February','March','April','May','June','July',
          'August','September','October','November','December') DESC
"""


def _salary_from_row(r: dict[str, Any]) -> SalaryRecord:
    values = {name: Decimal(str(r[name])) for name in AMOUNT_FIELDS}
    return SalaryRecord(
        user_id=int(r["user_id"]),
        month=r["month"],
        year=str(r["year"]),
        bank_name=r["bank_name"],
        bank_account=r["bank_account"],
        ifsc_code=r["ifsc_code"],
        pan=r["pan"],
        salary_id=int(r["salary_id"]),
        full_name=r.get("full_name"),
        **values,
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, db: Database):
        self._db = db

    def upsert(self, record: SalaryRecord) -> None:
        columns = salary_columns()
        updates = ", ".join(f"{c}=VALUES({c})" for c in columns if c not in ("user_id", "month", "year"))
        with self._db.cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO salaries({", ".join(columns)})
                VALUES({", ".join(["%s"] * len(columns))})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                tuple(getattr(record, c) for c in columns),
            )

    def get_for_user_month(self, user_id: int, month: str, year: str) -> Optional[SalaryRecord]:
        with self._db.cursor() as cur:
            cur.execute(
                f"{_SELECT} WHERE s.user_id=%s AND s.month=%s AND s.year=%s",
                (int(user_id), month, year),
            )
            r = cur.fetchone()
            return _salary_from_row(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[SalaryRecord]:
        with self._db.cursor() as cur:
            cur.execute(f"{_SELECT} WHERE s.user_id=%s {_ORDER_BY_PERIOD}", (int(user_id),))
            return [_salary_from_row(r) for r in cur.fetchall()]

    def list_for_department(self, dept_id: int, month: str, year: str) -> Sequence[SalaryRecord]:
        with self._db.cursor() as cur:
            cur.execute(
                f"{_SELECT} WHERE u.dept_id=%s AND s.month=%s AND s.year=%s ORDER BY u.full_name",
                (int(dept_id), month, year),
            )
            return [_salary_from_row(r) for r in cur.fetchall()]
