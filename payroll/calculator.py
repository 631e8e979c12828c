"""
Payroll arithmetic.

Pure functions over plain records; nothing here touches the database.
Attendance records only need ``date``, ``status``, ``check_in`` and
``check_out`` attributes; variable pay entries need ``status`` and ``amount``.

All money is ``Decimal`` rounded half-up to whole currency units.
"""
import calendar
from dataclasses import dataclass, field, asdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from .constants import (
    ESI_RATE,
    ESI_WAGE_CEILING,
    HRA_RATE,
    MAX_PF_AMOUNT,
    OVERTIME_MULTIPLIER,
    PF_RATE,
    STANDARD_HOURS_PER_DAY,
    TAX_SLABS,
)

ZERO = Decimal("0")
HALF = Decimal("0.5")

PRESENT_STATUSES = ("PRESENT", "LATE")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


@dataclass
class CalculationOptions:
    include_variable_pay: bool = True
    include_attendance: bool = True
    include_statutory_deductions: bool = True
    prorate: bool = True


@dataclass
class EmployeePayrollData:
    month: int
    year: int
    basic_salary: Decimal
    attendance: list = field(default_factory=list)
    variable_pay_entries: list = field(default_factory=list)
    hire_date: Optional[date] = None
    exit_date: Optional[date] = None
    allowances: Decimal = ZERO
    other_deductions: Decimal = ZERO


@dataclass
class PayrollResult:
    basic_salary: Decimal
    hra: Decimal
    variable_pay: Decimal
    overtime: Decimal
    bonus: Decimal
    allowances: Decimal
    total_earnings: Decimal
    pf: Decimal
    esi: Decimal
    tax: Decimal
    insurance: Decimal
    leave_deduction: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    working_days: int
    present_days: Decimal
    leave_days: Decimal

    def as_dict(self):
        return asdict(self)


def _is_working_day(day: date) -> bool:
    return day.weekday() < 5


def working_days_in_month(year: int, month: int) -> int:
    """Monday to Friday count for the month."""
    cal = calendar.Calendar()
    return sum(
        1 for d, weekday in cal.itermonthdays2(year, month)
        if d != 0 and weekday < 5
    )


def working_days_between(start: date, end: date) -> int:
    """Inclusive Monday to Friday count between two dates of the same month."""
    if end < start:
        return 0
    return sum(
        1 for d in range(start.day, end.day + 1)
        if _is_working_day(start.replace(day=d))
    )


def summarize_attendance(records, year: int, month: int):
    """
    Returns (present_days, leave_days, overtime_hours) for the given month.

    PRESENT and LATE count as a full day, HALF_DAY as half present and half
    leave, ABSENT as a leave day. HOLIDAY rows count for nothing.
    """
    present = ZERO
    leave = ZERO
    overtime_hours = ZERO
    standard = Decimal(STANDARD_HOURS_PER_DAY)

    for record in records:
        if record.date.year != year or record.date.month != month:
            continue

        if record.status in PRESENT_STATUSES:
            present += 1
            if record.check_in and record.check_out:
                seconds = (record.check_out - record.check_in).total_seconds()
                hours = Decimal(str(seconds)) / Decimal("3600")
                if hours > standard:
                    overtime_hours += hours - standard
        elif record.status == "ABSENT":
            leave += 1
        elif record.status == "HALF_DAY":
            present += HALF
            leave += HALF

    return present, leave, overtime_hours


def prorated_basic(basic, present_days, working_days: int, hire_date=None,
                   exit_date=None, year: int = None, month: int = None) -> Decimal:
    basic = to_decimal(basic)
    if working_days == 0:
        return ZERO

    daily = basic / Decimal(working_days)
    last_day = calendar.monthrange(year, month)[1] if year and month else None

    if hire_date and (hire_date.year, hire_date.month) == (year, month):
        days = working_days_between(hire_date, date(year, month, last_day))
        return round_money(daily * days)

    if exit_date and (exit_date.year, exit_date.month) == (year, month):
        days = working_days_between(date(year, month, 1), exit_date)
        return round_money(daily * days)

    return round_money(daily * to_decimal(present_days))


def hra(basic) -> Decimal:
    return round_money(to_decimal(basic) * HRA_RATE)


def variable_pay_total(entries) -> Decimal:
    return sum(
        (to_decimal(e.amount) for e in entries if e.status == "APPROVED"),
        ZERO,
    )


def overtime_pay(hours, basic, working_days: int) -> Decimal:
    hours = to_decimal(hours)
    if hours <= 0 or working_days == 0:
        return ZERO
    hourly_rate = to_decimal(basic) / (working_days * STANDARD_HOURS_PER_DAY)
    return round_money(hours * hourly_rate * OVERTIME_MULTIPLIER)


def provident_fund(basic) -> Decimal:
    return min(round_money(to_decimal(basic) * PF_RATE), MAX_PF_AMOUNT)


def esi(basic) -> Decimal:
    basic = to_decimal(basic)
    if basic > ESI_WAGE_CEILING:
        return ZERO
    return round_money(basic * ESI_RATE)


def income_tax(monthly_gross) -> Decimal:
    """Monthly share of the slab tax on the annualised gross."""
    annual = to_decimal(monthly_gross) * 12
    lower = ZERO
    for upper, base, rate in TAX_SLABS:
        if upper is None or annual <= upper:
            return round_money((base + (annual - lower) * rate) / 12)
        lower = upper
    return ZERO


def insurance(basic) -> Decimal:
    return ZERO


def leave_deduction(leave_days, basic, working_days: int) -> Decimal:
    leave_days = to_decimal(leave_days)
    if leave_days <= 0 or working_days == 0:
        return ZERO
    return round_money(to_decimal(basic) / working_days * leave_days)


def calculate_payroll(data: EmployeePayrollData,
                      options: CalculationOptions = None) -> PayrollResult:
    options = options or CalculationOptions()
    working_days = working_days_in_month(data.year, data.month)

    present_days = Decimal(working_days)
    leave_days = ZERO
    overtime_hours = ZERO
    if options.include_attendance:
        present_days, leave_days, overtime_hours = summarize_attendance(
            data.attendance, data.year, data.month)

    if options.prorate:
        basic = prorated_basic(
            data.basic_salary, present_days, working_days,
            data.hire_date, data.exit_date, data.year, data.month)
    else:
        basic = round_money(data.basic_salary)

    house_rent = hra(basic)
    variable = variable_pay_total(
        data.variable_pay_entries) if options.include_variable_pay else ZERO
    overtime = overtime_pay(overtime_hours, basic, working_days)
    allowances = round_money(data.allowances)

    total_earnings = basic + house_rent + variable + overtime + allowances

    pf = esi_amount = tax = insured = ZERO
    if options.include_statutory_deductions:
        pf = provident_fund(basic)
        esi_amount = esi(basic)
        tax = income_tax(total_earnings)
        insured = insurance(basic)

    leave_cut = leave_deduction(leave_days, basic, working_days)
    other = round_money(data.other_deductions)

    total_deductions = pf + esi_amount + tax + insured + leave_cut + other

    return PayrollResult(
        basic_salary=basic,
        hra=house_rent,
        variable_pay=variable,
        overtime=overtime,
        bonus=ZERO,
        allowances=allowances,
        total_earnings=total_earnings,
        pf=pf,
        esi=esi_amount,
        tax=tax,
        insurance=insured,
        leave_deduction=leave_cut,
        other_deductions=other,
        total_deductions=total_deductions,
        net_salary=total_earnings - total_deductions,
        working_days=working_days,
        present_days=present_days,
        leave_days=leave_days,
    )


def validate_result(result: PayrollResult):
    """Returns (errors, warnings). A result with errors must not be persisted."""
    errors: List[str] = []
    warnings: List[str] = []

    if result.basic_salary < 0:
        errors.append("Basic salary cannot be negative")
    if result.total_earnings < 0:
        errors.append("Total earnings cannot be negative")
    if result.total_deductions < 0:
        errors.append("Total deductions cannot be negative")
    if result.net_salary < 0:
        errors.append("Net salary cannot be negative")

    if result.pf > MAX_PF_AMOUNT:
        warnings.append(
            f"PF contribution ({result.pf}) exceeds maximum limit ({MAX_PF_AMOUNT})")

    if result.present_days > result.working_days:
        errors.append("Present days cannot exceed working days")
    if result.leave_days > result.working_days:
        errors.append("Leave days cannot exceed working days")

    expected_hra = hra(result.basic_salary)
    if abs(result.hra - expected_hra) > 1:
        warnings.append(
            f"HRA calculation may be incorrect. Expected: {expected_hra}, Actual: {result.hra}")

    return errors, warnings


def summarize(results):
    total_employees = len(results)
    totals = {
        "total_basic_salary": sum((r.basic_salary for r in results), ZERO),
        "total_earnings": sum((r.total_earnings for r in results), ZERO),
        "total_deductions": sum((r.total_deductions for r in results), ZERO),
        "total_net_salary": sum((r.net_salary for r in results), ZERO),
        "total_pf": sum((r.pf for r in results), ZERO),
        "total_esi": sum((r.esi for r in results), ZERO),
        "total_tax": sum((r.tax for r in results), ZERO),
    }
    average = (round_money(totals["total_net_salary"] / total_employees)
               if total_employees else ZERO)
    return {"total_employees": total_employees, **totals, "average_salary": average}
