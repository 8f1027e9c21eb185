from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SalaryRecord


class SalaryRepository(Protocol):
    def upsert(self, record: SalaryRecord) -> None:
        """Insert, or replace the row for the same (user_id, month, year)."""

        raise NotImplementedError

    def get_for_user_month(self, user_id: int, month: str, year: str) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[SalaryRecord]:
        raise NotImplementedError

    def list_for_department(self, dept_id: int, month: str, year: str) -> Sequence[SalaryRecord]:
        raise NotImplementedError
