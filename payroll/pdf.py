# payroll/pdf.py
import calendar
from io import BytesIO

from django.conf import settings
from django.utils import timezone
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

LEFT = 56
RIGHT_COL = 320
LINE = 18


def _money(value):
    return f"{value:,.2f}"


def _draw_table(c, x, y, title, rows, total_label, total):
    c.setFont("Helvetica-Bold", 11)
    c.drawString(x, y, title)
    y -= LINE
    c.setFont("Helvetica", 10)
    for label, amount in rows:
        c.drawString(x, y, label)
        c.drawRightString(x + 220, y, _money(amount))
        y -= LINE
    c.line(x, y + LINE - 4, x + 220, y + LINE - 4)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(x, y, total_label)
    c.drawRightString(x + 220, y, _money(total))
    return y - LINE


def render_payslip(payslip):
    """Returns the payslip PDF as bytes."""
    payroll = payslip.payroll
    employee = payslip.employee
    breakdown = getattr(payroll, "input", None)
    hrms = getattr(settings, "HRMS_SETTINGS", {})

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    y = height - 72

    c.setFont("Helvetica-Bold", 16)
    c.drawCentredString(width / 2, y, hrms.get("PAYSLIP_COMPANY_NAME", "HRMS"))
    y -= 22
    c.setFont("Helvetica", 11)
    period = f"{calendar.month_name[payslip.month]} {payslip.year}"
    c.drawCentredString(width / 2, y, f"Payslip for {period}")
    y -= 36

    department = employee.department.name if employee.department_id else "-"
    details = [
        ("Employee ID", employee.employee_id),
        ("Name", employee.full_name()),
        ("Department", department),
        ("Position", employee.position or "-"),
    ]
    if breakdown is not None:
        details += [
            ("Working days", breakdown.working_days),
            ("Present days", breakdown.present_days),
            ("Leave days", breakdown.leave_days),
        ]

    c.setFont("Helvetica", 10)
    for label, value in details:
        c.drawString(LEFT, y, f"{label}:")
        c.drawString(LEFT + 100, y, str(value))
        y -= LINE
    y -= LINE

    if breakdown is not None:
        earnings = [
            ("Basic salary", breakdown.basic_salary),
            ("HRA", breakdown.hra),
            ("Variable pay", breakdown.variable_pay),
            ("Overtime", breakdown.overtime),
            ("Bonus", breakdown.bonus),
            ("Allowances", breakdown.allowances),
        ]
        deductions = [
            ("Provident fund", breakdown.pf),
            ("ESI", breakdown.esi),
            ("Income tax", breakdown.tax),
            ("Insurance", breakdown.insurance),
            ("Leave deduction", breakdown.leave_deduction),
            ("Other deductions", breakdown.other_deductions),
        ]
        total_earnings = breakdown.total_earnings
        total_deductions = breakdown.total_deductions
    else:
        earnings = [
            ("Basic salary", payroll.basic_salary),
            ("Allowances", payroll.allowances),
        ]
        deductions = [("Deductions", payroll.deductions)]
        total_earnings = payroll.basic_salary + payroll.allowances
        total_deductions = payroll.deductions

    left_end = _draw_table(c, LEFT, y, "Earnings", earnings,
                           "Total earnings", total_earnings)
    right_end = _draw_table(c, RIGHT_COL, y, "Deductions", deductions,
                            "Total deductions", total_deductions)
    y = min(left_end, right_end) - LINE

    c.setFont("Helvetica-Bold", 13)
    c.drawString(LEFT, y, "Net pay")
    c.drawRightString(RIGHT_COL + 220, y, _money(payroll.net_salary))
    y -= 2 * LINE

    c.setFont("Helvetica-Oblique", 8)
    c.drawString(LEFT, 48, f"Generated {timezone.now():%Y-%m-%d %H:%M} UTC. "
                           "This is a system generated payslip.")
    c.showPage()
    c.save()
    return buf.getvalue()
