from decimal import Decimal

import pytest

from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, ValidationError
from src.hr_portal.hr_portal.payroll.calculator.standard_calculator import StandardPayslipCalculator
from src.hr_portal.hr_portal.payroll.service import PayrollService

BANK = dict(bank_name="State Bank", bank_account="0001112223", ifsc_code="sbin0001234", pan="abcde1234f")


@pytest.fixture
def service(salaries_repo, users_repo):
    return PayrollService(salaries_repo, users_repo, StandardPayslipCalculator())


def _save(service, admin, employee_id=1, month="October", year="2025", **amounts):
    return service.save_salary(
        admin,
        employee_id=employee_id,
        month=month,
        year=year,
        amounts=amounts or {"basic_pay": "30000", "hra": "12000", "pf": "3600"},
        **BANK,
    )


def test_admin_saves_salary_and_gets_payslip(service, salaries_repo, admin):
    payslip = _save(service, admin, month="october")

    stored = salaries_repo.get_for_user_month(1, "October", "2025")
    assert stored.basic_pay == Decimal("30000")
    assert stored.ifsc_code == "SBIN0001234"
    assert stored.pan == "ABCDE1234F"
    assert payslip.net_salary == Decimal("38400.00")


def test_saving_same_month_replaces_row(service, salaries_repo, admin):
    _save(service, admin)
    _save(service, admin, basic_pay="31000")

    assert len(salaries_repo.rows) == 1
    assert salaries_repo.get_for_user_month(1, "October", "2025").basic_pay == Decimal("31000")


def test_only_admin_saves_salary(service, head):
    with pytest.raises(AuthorizationError):
        _save(service, head)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"employee_id": 404},
        {"month": "Octember"},
        {"year": "25"},
        {"basic_pay": "abc"},
        {"pf": "-1"},
        {"hra": "NaN"},
    ],
)
def test_save_salary_validation(service, admin, kwargs):
    with pytest.raises(ValidationError):
        _save(service, admin, **kwargs)


def test_blank_amounts_count_as_zero(service, admin):
    payslip = _save(service, admin, basic_pay="1000", hra="", insurance=None)

    assert payslip.net_salary == Decimal("1000.00")


def test_staff_reads_only_own_payslip(service, admin, staff):
    _save(service, admin, employee_id=1)
    _save(service, admin, employee_id=2)

    assert service.get_payslip(staff, month="October", year="2025").record.user_id == 1
    with pytest.raises(AuthorizationError):
        service.get_payslip(staff, month="October", year="2025", employee_id=2)


def test_admin_reads_any_payslip(service, admin):
    _save(service, admin, employee_id=2)

    assert service.get_payslip(admin, month="October", year="2025", employee_id=2).record.user_id == 2


def test_missing_payslip(service, staff):
    with pytest.raises(ValidationError) as exc:
        service.get_payslip(staff, month="March", year="2025")

    assert str(exc.value) == "No salary record for March 2025"


def test_list_mine(service, admin, staff):
    _save(service, admin, month="September")
    _save(service, admin, month="October")
    _save(service, admin, employee_id=2)

    assert sorted(p.record.month for p in service.list_mine(staff)) == ["October", "September"]


def test_department_salaries_are_scoped(service, admin, head, staff):
    _save(service, admin, employee_id=1)
    _save(service, admin, employee_id=3)

    assert [p.record.user_id for p in service.list_for_department(head, month="October", year="2025", dept_id=2)] == [1]
    assert [p.record.user_id for p in service.list_for_department(admin, month="October", year="2025", dept_id=2)] == [3]
    with pytest.raises(AuthorizationError):
        service.list_for_department(staff, month="October", year="2025")
