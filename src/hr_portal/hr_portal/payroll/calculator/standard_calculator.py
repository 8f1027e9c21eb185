from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .base import PayslipCalculator
from ..model import Payslip, SalaryRecord

CENT = Decimal("0.01")


class StandardPayslipCalculator(PayslipCalculator):
    """Net salary = sum of earnings - sum of deductions, rounded to cents."""

    def compute(self, record: SalaryRecord) -> Payslip:
        earnings = sum(record.earnings().values(), Decimal("0")).quantize(CENT, rounding=ROUND_HALF_UP)
        deductions = sum(record.deductions().values(), Decimal("0")).quantize(CENT, rounding=ROUND_HALF_UP)
        return Payslip(
            record=record,
            total_earnings=earnings,
            total_deductions=deductions,
            net_salary=earnings - deductions,
        )
