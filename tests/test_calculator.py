from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from payroll import calculator
from payroll.calculator import CalculationOptions, EmployeePayrollData


def day(d, status="PRESENT", check_in=None, check_out=None):
    return SimpleNamespace(date=d, status=status, check_in=check_in, check_out=check_out)


def full_february(overtime_on=None):
    records = []
    for n in range(1, 30):
        d = date(2024, 2, n)
        if d.weekday() >= 5:
            continue
        if d == overtime_on:
            records.append(day(d, check_in=datetime(2024, 2, n, 9, 0),
                               check_out=datetime(2024, 2, n, 19, 0)))
        else:
            records.append(day(d))
    return records


class TestCalendar:

    def test_working_days_in_month(self):
        assert calculator.working_days_in_month(2024, 1) == 23
        assert calculator.working_days_in_month(2024, 2) == 21

    def test_working_days_between(self):
        assert calculator.working_days_between(date(2024, 2, 19), date(2024, 2, 29)) == 9
        assert calculator.working_days_between(date(2024, 2, 10), date(2024, 2, 9)) == 0


class TestComponents:

    def test_round_money_is_half_up(self):
        assert calculator.round_money(Decimal("157.5")) == Decimal("158")
        assert calculator.round_money("2708.33") == Decimal("2708")
        assert calculator.round_money(None) == Decimal("0")

    def test_hra(self):
        assert calculator.hra(30000) == Decimal("12000")

    def test_provident_fund_is_capped(self):
        assert calculator.provident_fund(10000) == Decimal("1200")
        assert calculator.provident_fund(20000) == Decimal("1800")

    def test_esi_ceiling(self):
        assert calculator.esi(20000) == Decimal("150")
        assert calculator.esi(21000) == Decimal("158")
        assert calculator.esi(25000) == Decimal("0")

    def test_income_tax_slabs(self):
        assert calculator.income_tax(20000) == Decimal("0")
        assert calculator.income_tax(50000) == Decimal("2708")
        assert calculator.income_tax(100000) == Decimal("14375")

    def test_overtime_and_leave(self):
        assert calculator.overtime_pay(2, 21000, 21) == Decimal("375")
        assert calculator.overtime_pay(0, 21000, 21) == Decimal("0")
        assert calculator.leave_deduction(Decimal("1.5"), 21000, 21) == Decimal("1500")
        assert calculator.leave_deduction(1, 21000, 0) == Decimal("0")

    def test_variable_pay_counts_approved_only(self):
        entries = [
            SimpleNamespace(status="APPROVED", amount=Decimal("1000")),
            SimpleNamespace(status="PENDING", amount=Decimal("500")),
            SimpleNamespace(status="REJECTED", amount=Decimal("250")),
        ]
        assert calculator.variable_pay_total(entries) == Decimal("1000")

    def test_summarize_attendance(self):
        records = [
            day(date(2024, 2, 1), check_in=datetime(2024, 2, 1, 9, 0),
                check_out=datetime(2024, 2, 1, 19, 0)),
            day(date(2024, 2, 2), status="HALF_DAY"),
            day(date(2024, 2, 5), status="ABSENT"),
            day(date(2024, 2, 6), status="HOLIDAY"),
            day(date(2024, 3, 1)),
        ]
        present, leave, overtime = calculator.summarize_attendance(records, 2024, 2)
        assert present == Decimal("1.5")
        assert leave == Decimal("1.5")
        assert overtime == Decimal("2")


class TestProration:

    def test_by_present_days(self):
        assert calculator.prorated_basic(21000, Decimal("10"), 21, year=2024, month=2) == Decimal("10000")

    def test_joined_mid_month(self):
        result = calculator.prorated_basic(
            21000, 0, 21, hire_date=date(2024, 2, 19), year=2024, month=2)
        assert result == Decimal("9000")

    def test_left_mid_month(self):
        result = calculator.prorated_basic(
            21000, 0, 21, exit_date=date(2024, 2, 2), year=2024, month=2)
        assert result == Decimal("2000")

    def test_no_working_days(self):
        assert calculator.prorated_basic(21000, 5, 0) == Decimal("0")


class TestCalculatePayroll:

    def test_full_month_with_overtime_and_variable_pay(self):
        data = EmployeePayrollData(
            month=2, year=2024, basic_salary=Decimal("21000"),
            attendance=full_february(overtime_on=date(2024, 2, 1)),
            variable_pay_entries=[SimpleNamespace(status="APPROVED", amount=Decimal("1000"))],
        )
        result = calculator.calculate_payroll(data)

        assert result.working_days == 21
        assert result.present_days == 21
        assert result.basic_salary == Decimal("21000")
        assert result.hra == Decimal("8400")
        assert result.variable_pay == Decimal("1000")
        assert result.overtime == Decimal("375")
        assert result.total_earnings == Decimal("30775")
        assert result.pf == Decimal("1800")
        assert result.esi == Decimal("158")
        assert result.tax == Decimal("497")
        assert result.total_deductions == Decimal("2455")
        assert result.net_salary == Decimal("28320")

    def test_without_attendance_or_proration(self):
        data = EmployeePayrollData(month=1, year=2024, basic_salary=Decimal("30000"))
        options = CalculationOptions(include_attendance=False, prorate=False)
        result = calculator.calculate_payroll(data, options)

        assert result.present_days == 23
        assert result.total_earnings == Decimal("42000")
        assert result.esi == Decimal("0")
        assert result.tax == Decimal("1108")
        assert result.net_salary == Decimal("39092")

    def test_statutory_deductions_can_be_skipped(self):
        data = EmployeePayrollData(month=1, year=2024, basic_salary=Decimal("30000"))
        options = CalculationOptions(
            include_attendance=False, prorate=False, include_statutory_deductions=False)
        result = calculator.calculate_payroll(data, options)

        assert result.total_deductions == Decimal("0")
        assert result.net_salary == result.total_earnings

    def test_variable_pay_can_be_excluded(self):
        data = EmployeePayrollData(
            month=1, year=2024, basic_salary=Decimal("30000"),
            variable_pay_entries=[SimpleNamespace(status="APPROVED", amount=Decimal("5000"))],
        )
        options = CalculationOptions(
            include_attendance=False, prorate=False, include_variable_pay=False)
        assert calculator.calculate_payroll(data, options).variable_pay == Decimal("0")


class TestValidation:

    def _result(self):
        data = EmployeePayrollData(month=1, year=2024, basic_salary=Decimal("30000"))
        return calculator.calculate_payroll(
            data, CalculationOptions(include_attendance=False, prorate=False))

    def test_clean_result(self):
        assert calculator.validate_result(self._result()) == ([], [])

    def test_negative_net_is_an_error(self):
        result = replace(self._result(), net_salary=Decimal("-1"))
        errors, _ = calculator.validate_result(result)
        assert "Net salary cannot be negative" in errors

    def test_present_days_beyond_working_days(self):
        result = replace(self._result(), present_days=Decimal("30"))
        errors, _ = calculator.validate_result(result)
        assert "Present days cannot exceed working days" in errors

    def test_hra_mismatch_is_a_warning(self):
        result = replace(self._result(), hra=Decimal("100"))
        errors, warnings = calculator.validate_result(result)
        assert errors == []
        assert warnings and warnings[0].startswith("HRA calculation may be incorrect")


def test_summarize():
    data = EmployeePayrollData(month=1, year=2024, basic_salary=Decimal("30000"))
    result = calculator.calculate_payroll(
        data, CalculationOptions(include_attendance=False, prorate=False))
    summary = calculator.summarize([result, result])

    assert summary["total_employees"] == 2
    assert summary["total_net_salary"] == Decimal("78184")
    assert summary["average_salary"] == Decimal("39092")
    assert calculator.summarize([])["average_salary"] == Decimal("0")
