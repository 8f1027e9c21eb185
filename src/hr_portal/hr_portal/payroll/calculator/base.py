from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import Payslip, SalaryRecord


class PayslipCalculator(ABC):
    """Calculator interface (Strategy Pattern for payslip totals)."""

    @abstractmethod
    def compute(self, record: SalaryRecord) -> Payslip:
        raise NotImplementedError
