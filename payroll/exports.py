# payroll/exports.py
import csv
import io

from .models import Payroll, PayrollCorrectionRequest, PayrollInput, VariablePayEntry


def _who(user):
    return user.display_name() if user else ""


def _when(value):
    return value.strftime("%Y-%m-%d %H:%M") if value else ""


def _employee_cols(employee):
    return [
        employee.employee_id,
        employee.full_name(),
        employee.department.name if employee.department_id else "",
    ]


def _payroll_summary(month, year, department=None, status=None):
    qs = Payroll.objects.filter(month=month, year=year).select_related(
        "employee", "employee__department")
    if department:
        qs = qs.filter(employee__department_id=department)
    if status:
        qs = qs.filter(status=status)
    qs = qs.order_by("employee__department__name", "employee__first_name",
                     "employee__last_name")

    header = ["Employee ID", "Employee Name", "Department", "Position",
              "Basic Salary", "Allowances", "Deductions", "Net Salary",
              "Status", "Pay Date"]
    rows = [
        _employee_cols(p.employee) + [
            p.employee.position,
            p.basic_salary, p.allowances, p.deductions, p.net_salary,
            p.status,
            p.paid_at.strftime("%Y-%m-%d") if p.paid_at else "",
        ]
        for p in qs
    ]
    return header, rows


def _employee_details(month, year, department=None, status=None):
    qs = PayrollInput.objects.filter(month=month, year=year).select_related(
        "employee", "employee__department")
    if department:
        qs = qs.filter(employee__department_id=department)
    if status:
        qs = qs.filter(status=status)
    qs = qs.order_by("employee__department__name", "employee__first_name",
                     "employee__last_name")

    header = ["Employee ID", "Name", "Department", "Position", "Basic Salary",
              "HRA", "Variable Pay", "Overtime", "Bonus", "Allowances",
              "Total Earnings", "PF", "ESI", "Tax", "Insurance",
              "Leave Deduction", "Other Deductions", "Total Deductions",
              "Net Salary", "Working Days", "Present Days", "Leave Days",
              "Status", "Notes"]
    rows = [
        _employee_cols(i.employee) + [
            i.employee.position,
            i.basic_salary, i.hra, i.variable_pay, i.overtime, i.bonus,
            i.allowances, i.total_earnings,
            i.pf, i.esi, i.tax, i.insurance, i.leave_deduction,
            i.other_deductions, i.total_deductions,
            i.total_earnings - i.total_deductions,
            i.working_days, i.present_days, i.leave_days,
            i.status, i.notes,
        ]
        for i in qs
    ]
    return header, rows


def _variable_pay(month, year, department=None, status=None):
    qs = VariablePayEntry.objects.filter(month=month, year=year).select_related(
        "employee", "employee__department", "submitted_by", "approved_by",
        "rejected_by")
    if department:
        qs = qs.filter(employee__department_id=department)
    if status:
        qs = qs.filter(status=status)
    qs = qs.order_by("employee__department__name", "employee__first_name",
                     "employee__last_name")

    header = ["Employee ID", "Name", "Department", "Type", "Amount",
              "Description", "Status", "Submitted By", "Submitted At",
              "Approved By", "Approved At", "Rejected By", "Rejected At",
              "Rejection Reason"]
    rows = [
        _employee_cols(e.employee) + [
            e.get_type_display(), e.amount, e.description, e.status,
            _who(e.submitted_by), _when(e.created_at),
            _who(e.approved_by), _when(e.approved_at),
            _who(e.rejected_by), _when(e.rejected_at),
            e.rejection_reason,
        ]
        for e in qs
    ]
    return header, rows


def _corrections(month, year, department=None, status=None):
    qs = PayrollCorrectionRequest.objects.filter(
        payroll__month=month, payroll__year=year
    ).select_related("employee", "employee__department", "requested_by",
                     "reviewed_by")
    if department:
        qs = qs.filter(employee__department_id=department)
    if status:
        qs = qs.filter(status=status)
    qs = qs.order_by("employee__department__name", "employee__first_name",
                     "employee__last_name")

    header = ["Employee ID", "Name", "Department", "Type", "Description",
              "Requested Amount", "Status", "Submitted By", "Submitted At",
              "Reviewed By", "Reviewed At", "Resolution"]
    rows = [
        _employee_cols(c.employee) + [
            c.get_type_display(), c.description,
            c.requested_amount if c.requested_amount is not None else "",
            c.status,
            _who(c.requested_by), _when(c.created_at),
            _who(c.reviewed_by), _when(c.reviewed_at),
            c.resolution,
        ]
        for c in qs
    ]
    return header, rows


BUILDERS = {
    "payroll-summary": _payroll_summary,
    "employee-details": _employee_details,
    "variable-pay": _variable_pay,
    "corrections": _corrections,
}


def build_export(export_format, month, year, department=None, status=None):
    """Returns (csv_text, row_count)."""
    header, rows = BUILDERS[export_format](month, year, department, status)
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(header)
    writer.writerows(rows)
    return out.getvalue(), len(rows)


def export_filename(export_format, month, year):
    return f"{export_format}-{year}-{month:02d}.csv"
