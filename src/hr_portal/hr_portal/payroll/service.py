from __future__ import annotations

import calendar
import logging
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import UserContext, department_scope
from ..users.repository import UserRepository
from .calculator.base import PayslipCalculator
from .model import AMOUNT_FIELDS, Payslip, SalaryRecord
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

MONTHS = tuple(calendar.month_name)[1:]


def _parse_amount(name: str, raw) -> Decimal:
    if raw is None or str(raw).strip() == "":
        return Decimal("0")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number") from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{name} must be zero or more")
    return amount


def _check_period(month: str, year: str) -> tuple[str, str]:
    month = (month or "").strip().capitalize()
    if month not in MONTHS:
        raise ValidationError("Month must be a full month name, e.g. January")
    year = str(year or "").strip()
    if not (len(year) == 4 and year.isdigit()):
        raise ValidationError("Year must have four digits")
    return month, year


class PayrollService:
    """Use case: salary entry (admin) and payslips."""

    def __init__(self, salaries: SalaryRepository, users: UserRepository, calculator: PayslipCalculator):
        self._salaries = salaries
        self._users = users
        self._calculator = calculator

    def save_salary(
        self,
        user: UserContext,
        *,
        employee_id: int,
        month: str,
        year: str,
        bank_name: str,
        bank_account: str,
        ifsc_code: str,
        pan: str,
        amounts: Mapping[str, object],
    ) -> Payslip:
        if not user.is_admin:
            raise AuthorizationError("You do not have permission")

        employee = self._users.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise ValidationError("Employee does not exist")

        month, year = _check_period(month, year)
        record = SalaryRecord(
            user_id=employee.user_id,
            month=month,
            year=year,
            bank_name=require_non_empty(bank_name, "Bank name"),
            bank_account=require_non_empty(bank_account, "Bank account"),
            ifsc_code=require_non_empty(ifsc_code, "IFSC code").upper(),
            pan=require_non_empty(pan, "PAN").upper(),
            full_name=employee.full_name,
            **{name: _parse_amount(name, amounts.get(name)) for name in AMOUNT_FIELDS},
        )
        self._salaries.upsert(record)
        logger.info("salary saved for user=%s %s %s by admin=%s", employee.user_id, month, year, user.user_id)
        return self._calculator.compute(record)

    def get_payslip(
        self, user: UserContext, *, month: str, year: str, employee_id: Optional[int] = None
    ) -> Payslip:
        """Own payslip; admins may ask for anyone's."""
        target = employee_id or user.user_id
        if target != user.user_id and not user.is_admin:
            raise AuthorizationError("You do not have permission")

        month, year = _check_period(month, year)
        record = self._salaries.get_for_user_month(target, month, year)
        if not record:
            raise ValidationError(f"No salary record for {month} {year}")
        return self._calculator.compute(record)

    def list_mine(self, user: UserContext) -> list[Payslip]:
        return [self._calculator.compute(r) for r in self._salaries.list_for_user(user.user_id)]

    def list_for_department(
        self, user: UserContext, *, month: str, year: str, dept_id: Optional[int] = None
    ) -> list[Payslip]:
        scope = department_scope(user, dept_id)
        month, year = _check_period(month, year)
        return [self._calculator.compute(r) for r in self._salaries.list_for_department(scope, month, year)]
