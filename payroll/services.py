# payroll/services.py
import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from attendance.models import Attendance
from employees.models import Employee
from .calculator import (
    CalculationOptions,
    EmployeePayrollData,
    calculate_payroll,
    summarize,
    validate_result,
)
from .models import (
    Payroll,
    PayrollAuditLog,
    PayrollCorrectionRequest,
    PayrollCycle,
    PayrollInput,
    Payslip,
    VariablePayEntry,
)

logger = logging.getLogger(__name__)


def client_meta(request):
    if request is None:
        return None, ""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    ip = forwarded.split(",")[0].strip() if forwarded else request.META.get("REMOTE_ADDR")
    user_agent = request.META.get("HTTP_USER_AGENT", "")[:255]
    return ip or None, user_agent


def audit(action, performed_by, payroll=None, employee=None, details=None, request=None):
    ip, user_agent = client_meta(request)
    return PayrollAuditLog.objects.create(
        action=action,
        performed_by=performed_by,
        payroll=payroll,
        employee=employee if employee is not None else getattr(payroll, "employee", None),
        details=details or {},
        ip_address=ip,
        user_agent=user_agent,
    )


def result_to_json(result):
    """PayrollResult -> JSON-safe dict (decimals as strings)."""
    return {
        key: (str(value) if not isinstance(value, int) else value)
        for key, value in result.as_dict().items()
    }


def build_payroll_data(employee, month, year, options):
    attendance = []
    if options.include_attendance:
        attendance = list(Attendance.objects.filter(
            employee=employee, date__year=year, date__month=month
        ).order_by("date"))

    entries = []
    if options.include_variable_pay:
        entries = list(VariablePayEntry.objects.filter(
            employee=employee, month=month, year=year,
            status=VariablePayEntry.STATUS_APPROVED,
        ))

    return EmployeePayrollData(
        month=month,
        year=year,
        basic_salary=employee.salary,
        attendance=attendance,
        variable_pay_entries=entries,
        hire_date=employee.hire_date,
        exit_date=employee.exit_date,
    )


class PayrollService:

    @staticmethod
    def preview(employee, month, year, options=None):
        options = options or CalculationOptions()
        result = calculate_payroll(
            build_payroll_data(employee, month, year, options), options)
        errors, warnings = validate_result(result)
        return result, errors, warnings

    @staticmethod
    def ensure_open_cycle(month, year, user):
        cycle, created = PayrollCycle.objects.get_or_create(
            month=month, year=year,
            defaults={"status": PayrollCycle.STATUS_IN_PROGRESS, "created_by": user},
        )
        if cycle.is_closed:
            raise ValidationError(
                f"Payroll cycle {year}-{month:02d} is {cycle.status.lower()} "
                f"and cannot be processed.")
        if cycle.status == PayrollCycle.STATUS_DRAFT:
            cycle.status = PayrollCycle.STATUS_IN_PROGRESS
            cycle.save(update_fields=["status", "updated_at"])
        return cycle

    @staticmethod
    def _save_result(employee, month, year, result, user):
        payroll, _ = Payroll.objects.update_or_create(
            employee=employee, month=month, year=year,
            defaults={
                "basic_salary": result.basic_salary,
                "allowances": result.total_earnings - result.basic_salary,
                "deductions": result.total_deductions,
                "net_salary": result.net_salary,
                "status": Payroll.STATUS_PROCESSED,
            },
        )
        PayrollInput.objects.update_or_create(
            payroll=payroll,
            defaults={
                "employee": employee,
                "month": month,
                "year": year,
                "basic_salary": result.basic_salary,
                "hra": result.hra,
                "variable_pay": result.variable_pay,
                "overtime": result.overtime,
                "bonus": result.bonus,
                "allowances": result.allowances,
                "total_earnings": result.total_earnings,
                "pf": result.pf,
                "esi": result.esi,
                "tax": result.tax,
                "insurance": result.insurance,
                "leave_deduction": result.leave_deduction,
                "other_deductions": result.other_deductions,
                "total_deductions": result.total_deductions,
                "working_days": result.working_days,
                "present_days": result.present_days,
                "leave_days": result.leave_days,
                "status": PayrollInput.STATUS_PROCESSED,
                "processed_by": user,
                "processed_at": timezone.now(),
            },
        )
        return payroll

    @staticmethod
    def process(employees, month, year, user, options=None, request=None):
        """
        Calculates and stores payroll for each employee. Invalid results and
        per-employee failures are collected, not raised.
        """
        options = options or CalculationOptions()
        PayrollService.ensure_open_cycle(month, year, user)

        results, errors, calculated = [], [], []

        for employee in employees:
            name = employee.full_name()
            already_paid = Payroll.objects.filter(
                employee=employee, month=month, year=year,
                status=Payroll.STATUS_PAID).exists()
            if already_paid:
                errors.append({
                    "employee_id": employee.id,
                    "employee_name": name,
                    "errors": ["Payroll already paid for this period"],
                    "warnings": [],
                })
                continue

            try:
                result, result_errors, warnings = PayrollService.preview(
                    employee, month, year, options)
                if result_errors:
                    errors.append({
                        "employee_id": employee.id,
                        "employee_name": name,
                        "errors": result_errors,
                        "warnings": warnings,
                    })
                    continue

                with transaction.atomic():
                    payroll = PayrollService._save_result(
                        employee, month, year, result, user)
                    audit(
                        "PAYROLL_PROCESSED", user, payroll=payroll,
                        details={
                            "month": month,
                            "year": year,
                            "net_salary": str(result.net_salary),
                            "warnings": warnings,
                        },
                        request=request,
                    )
            except (DatabaseError, ValidationError):
                logger.exception("Payroll processing failed: employee=%s %s-%02d",
                                 employee.employee_id, year, month)
                errors.append({
                    "employee_id": employee.id,
                    "employee_name": name,
                    "errors": ["Processing failed"],
                    "warnings": [],
                })
                continue

            logger.info("Payroll processed: employee=%s %s-%02d net=%s",
                        employee.employee_id, year, month, result.net_salary)
            calculated.append(result)
            results.append({
                "employee_id": employee.id,
                "employee_name": name,
                "payroll_id": payroll.id,
                "calculation": result_to_json(result),
                "warnings": warnings,
            })

        summary = {k: (str(v) if not isinstance(v, int) else v)
                   for k, v in summarize(calculated).items()}
        return {
            "processed": len(results),
            "total": len(results) + len(errors),
            "error_count": len(errors),
            "results": results,
            "errors": errors,
            "summary": summary,
        }

    @staticmethod
    def set_status(payroll, status, user, request=None):
        if payroll.status == Payroll.STATUS_PAID and status != Payroll.STATUS_PAID:
            raise ValidationError("A paid payroll cannot change status.")

        previous = payroll.status
        payroll.status = status
        if status == Payroll.STATUS_PAID and not payroll.paid_at:
            payroll.paid_at = timezone.now()
        payroll.save(update_fields=["status", "paid_at", "updated_at"])

        audit("PAYROLL_STATUS_CHANGED", user, payroll=payroll,
              details={"from": previous, "to": status}, request=request)
        return payroll


class PayrollCycleService:

    @staticmethod
    @transaction.atomic
    def create_cycle(month, year, user, notes="", request=None):
        if PayrollCycle.objects.filter(month=month, year=year).exists():
            raise ValidationError(
                f"Payroll cycle for {year}-{month:02d} already exists.")

        cycle = PayrollCycle.objects.create(
            month=month, year=year, notes=notes or "", created_by=user)

        created = 0
        for employee in Employee.objects.filter(is_active=True):
            _, was_created = Payroll.objects.get_or_create(
                employee=employee, month=month, year=year,
                defaults={
                    "basic_salary": employee.salary,
                    "status": Payroll.STATUS_DRAFT,
                },
            )
            created += int(was_created)

        audit("CYCLE_CREATED", user,
              details={"cycle_id": cycle.id, "month": month, "year": year,
                       "payrolls_created": created},
              request=request)
        logger.info("Payroll cycle created: %s-%02d payrolls=%s", year, month, created)
        return cycle, created

    @staticmethod
    def update_cycle(cycle, user, status=None, notes=None, request=None):
        if cycle.status == PayrollCycle.STATUS_LOCKED:
            raise ValidationError("A locked payroll cycle cannot be changed.")

        previous = cycle.status
        if status:
            cycle.status = status
        if notes is not None:
            cycle.notes = notes
        cycle.save()

        if status and status != previous:
            audit("CYCLE_STATUS_CHANGED", user,
                  details={"cycle_id": cycle.id, "from": previous, "to": status},
                  request=request)
        return cycle

    @staticmethod
    @transaction.atomic
    def delete_cycle(cycle, user, request=None):
        if cycle.status != PayrollCycle.STATUS_DRAFT:
            raise ValidationError("Only draft payroll cycles can be deleted.")

        deleted, _ = Payroll.objects.filter(
            month=cycle.month, year=cycle.year, status=Payroll.STATUS_DRAFT
        ).delete()
        audit("CYCLE_DELETED", user,
              details={"month": cycle.month, "year": cycle.year,
                       "payrolls_deleted": deleted},
              request=request)
        cycle.delete()


class PayrollInputService:

    @staticmethod
    def update(payroll_input, user, status=None, notes=None, request=None):
        if payroll_input.status == PayrollInput.STATUS_PROCESSED:
            raise ValidationError("Processed payroll inputs cannot be changed.")

        if status:
            payroll_input.status = status
            if status == PayrollInput.STATUS_APPROVED:
                payroll_input.approved_by = user
                payroll_input.approved_at = timezone.now()
        if notes is not None:
            payroll_input.notes = notes
        payroll_input.save()

        if status:
            audit(f"PAYROLL_INPUT_{status}", user,
                  payroll=payroll_input.payroll,
                  details={"payroll_input_id": payroll_input.id},
                  request=request)
        return payroll_input


class VariablePayService:

    @staticmethod
    def decide(entry, user, status, rejection_reason="", request=None):
        if entry.status != VariablePayEntry.STATUS_PENDING:
            raise ValidationError("Only pending entries can be updated.")

        now = timezone.now()
        entry.status = status
        if status == VariablePayEntry.STATUS_APPROVED:
            entry.approved_by = user
            entry.approved_at = now
        else:
            entry.rejected_by = user
            entry.rejected_at = now
            entry.rejection_reason = rejection_reason or ""
        entry.save()

        audit(f"VARIABLE_PAY_ENTRY_{status}", user, employee=entry.employee,
              details={"entry_id": entry.id, "type": entry.type,
                       "amount": str(entry.amount), "month": entry.month,
                       "year": entry.year},
              request=request)
        return entry


class PayslipService:

    @staticmethod
    def file_name_for(payroll):
        return (f"payslip-{payroll.employee.employee_id}-"
                f"{payroll.year}-{payroll.month:02d}.pdf")

    @staticmethod
    @transaction.atomic
    def generate(payrolls, user, request=None):
        created, skipped = [], 0
        for payroll in payrolls:
            if payroll.status not in (Payroll.STATUS_PROCESSED, Payroll.STATUS_PAID):
                skipped += 1
                continue
            if Payslip.objects.filter(payroll=payroll).exists():
                skipped += 1
                continue

            payslip = Payslip.objects.create(
                payroll=payroll,
                employee=payroll.employee,
                month=payroll.month,
                year=payroll.year,
                file_name=PayslipService.file_name_for(payroll),
                generated_by=user,
            )
            audit("PAYSLIP_GENERATED", user, payroll=payroll,
                  details={"payslip_id": payslip.id, "file_name": payslip.file_name},
                  request=request)
            created.append(payslip)
        return created, skipped

    @staticmethod
    def mark_downloaded(payslip, user, request=None):
        payslip.status = Payslip.STATUS_DOWNLOADED
        payslip.downloaded_at = timezone.now()
        payslip.save(update_fields=["status", "downloaded_at"])
        audit("PAYSLIP_DOWNLOADED", user, payroll=payslip.payroll,
              details={"payslip_id": payslip.id, "file_name": payslip.file_name},
              request=request)
        return payslip


class CorrectionService:

    @staticmethod
    def review(correction, user, data, request=None):
        if correction.status == PayrollCorrectionRequest.STATUS_RESOLVED:
            raise ValidationError("Resolved correction requests cannot be changed.")

        new_status = data.get("status")
        if new_status and new_status != correction.status:
            correction.status = new_status
            correction.reviewed_by = user
            correction.reviewed_at = timezone.now()
        if "review_comments" in data:
            correction.review_comments = data["review_comments"]
        if "resolution" in data:
            correction.resolution = data["resolution"]
        correction.save()

        audit(f"CORRECTION_REQUEST_{correction.status}", user,
              payroll=correction.payroll,
              details={"correction_id": correction.id},
              request=request)
        return correction
