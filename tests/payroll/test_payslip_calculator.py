from decimal import Decimal

from src.hr_portal.hr_portal.payroll.calculator.standard_calculator import StandardPayslipCalculator
from src.hr_portal.hr_portal.payroll.model import SalaryRecord


def _record(**amounts):
    return SalaryRecord(
        user_id=1,
        month="October",
        year="2025",
        bank_name="State Bank",
        bank_account="0001112223",
        ifsc_code="SBIN0001234",
        pan="ABCDE1234F",
        **{k: Decimal(v) for k, v in amounts.items()},
    )


def test_net_is_earnings_minus_deductions():
    payslip = StandardPayslipCalculator().compute(
        _record(basic_pay="30000", hra="12000", da="3000", special_allowance="2500", pf="3600", income_tax="1250.50")
    )

    assert payslip.total_earnings == Decimal("47500.00")
    assert payslip.total_deductions == Decimal("4850.50")
    assert payslip.net_salary == Decimal("42649.50")


def test_empty_record_is_zero():
    payslip = StandardPayslipCalculator().compute(_record())

    assert payslip.net_salary == Decimal("0.00")


def test_payslip_dict_keeps_amounts_as_strings():
    body = StandardPayslipCalculator().compute(_record(basic_pay="100.5", insurance="0.25")).to_dict()

    assert body["earnings"]["basic_pay"] == "100.5"
    assert body["deductions"]["insurance"] == "0.25"
    assert body["net_salary"] == "100.25"
    assert body["bank"]["ifsc"] == "SBIN0001234"
