from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Optional

EARNING_FIELDS = (
    "basic_pay",
    "hra",
    "da",
    "special_allowance",
    "medical_allowance",
    "conveyance_allowance",
)
DEDUCTION_FIELDS = ("pf", "professional_tax", "income_tax", "insurance")
AMOUNT_FIELDS = EARNING_FIELDS + DEDUCTION_FIELDS


@dataclass(frozen=True)
class SalaryRecord:
    """Monthly salary entry for one employee; unique per (user_id, month, year)."""

    user_id: int
    month: str
    year: str
    bank_name: str
    bank_account: str
    ifsc_code: str
    pan: str

    basic_pay: Decimal = Decimal("0")
    hra: Decimal = Decimal("0")
    da: Decimal = Decimal("0")
    special_allowance: Decimal = Decimal("0")
    medical_allowance: Decimal = Decimal("0")
    conveyance_allowance: Decimal = Decimal("0")

    pf: Decimal = Decimal("0")
    professional_tax: Decimal = Decimal("0")
    income_tax: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")

    salary_id: Optional[int] = None
    full_name: Optional[str] = None

    def earnings(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in EARNING_FIELDS}

    def deductions(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in DEDUCTION_FIELDS}


@dataclass(frozen=True)
class Payslip:
    record: SalaryRecord
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    def to_dict(self) -> dict:
        r = self.record

        def money(amounts: dict) -> dict:
            return {k: str(v) for k, v in amounts.items()}

        return {
            "user_id": r.user_id,
            "full_name": r.full_name,
            "month": r.month,
            "year": r.year,
            "bank": {
                "name": r.bank_name,
                "account": r.bank_account,
                "ifsc": r.ifsc_code,
                "pan": r.pan,
            },
            "earnings": money(r.earnings()),
            "deductions": money(r.deductions()),
            "total_earnings": str(self.total_earnings),
            "total_deductions": str(self.total_deductions),
            "net_salary": str(self.net_salary),
        }


def salary_columns() -> list[str]:
    """Column names of the salaries table, in dataclass order."""
    return [f.name for f in fields(SalaryRecord) if f.name not in ("salary_id", "full_name")]
