# payroll/constants.py
from decimal import Decimal

PF_RATE = Decimal("0.12")
MAX_PF_AMOUNT = Decimal("1800")

ESI_RATE = Decimal("0.0075")
# ESI only applies at or below this monthly basic
ESI_WAGE_CEILING = Decimal("21000")

HRA_RATE = Decimal("0.40")

STANDARD_HOURS_PER_DAY = 8
OVERTIME_MULTIPLIER = Decimal("1.5")

# (annual upper bound, base tax at the lower bound, marginal rate)
TAX_SLABS = [
    (Decimal("250000"), Decimal("0"), Decimal("0")),
    (Decimal("500000"), Decimal("0"), Decimal("0.05")),
    (Decimal("1000000"), Decimal("12500"), Decimal("0.20")),
    (None, Decimal("112500"), Decimal("0.30")),
]

MIN_PAYROLL_YEAR = 2020
MAX_PAYROLL_YEAR = 2030

EXPORT_FORMATS = [
    ("payroll-summary", "Payroll Summary"),
    ("employee-details", "Employee Details"),
    ("variable-pay", "Variable Pay"),
    ("corrections", "Corrections"),
]
