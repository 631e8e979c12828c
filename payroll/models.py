# payroll/models.py
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from employees.models import Employee
from .constants import MAX_PAYROLL_YEAR, MIN_PAYROLL_YEAR

User = settings.AUTH_USER_MODEL

MONTH_VALIDATORS = [MinValueValidator(1), MaxValueValidator(12)]
YEAR_VALIDATORS = [MinValueValidator(MIN_PAYROLL_YEAR),
                   MaxValueValidator(MAX_PAYROLL_YEAR)]


def money_field(**kwargs):
    kwargs.setdefault('default', 0)
    return models.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class PayrollCycle(models.Model):
    STATUS_DRAFT = 'DRAFT'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_PENDING_APPROVAL = 'PENDING_APPROVAL'
    STATUS_FINALIZED = 'FINALIZED'
    STATUS_LOCKED = 'LOCKED'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_PENDING_APPROVAL, 'Pending Approval'),
        (STATUS_FINALIZED, 'Finalized'),
        (STATUS_LOCKED, 'Locked'),
    ]

    # no further processing once a cycle reaches these
    CLOSED_STATUSES = (STATUS_FINALIZED, STATUS_LOCKED)

    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveSmallIntegerField(validators=YEAR_VALIDATORS)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    notes = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='payroll_cycles')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('month', 'year')
        ordering = ['-year', '-month']

    @property
    def is_closed(self):
        return self.status in self.CLOSED_STATUSES

    def __str__(self):
        return f"{self.year}-{self.month:02d} ({self.status})"


class Payroll(models.Model):
    STATUS_DRAFT = 'DRAFT'
    STATUS_PENDING = 'PENDING'
    STATUS_PROCESSED = 'PROCESSED'
    STATUS_PAID = 'PAID'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_PENDING, 'Pending'),
        (STATUS_PROCESSED, 'Processed'),
        (STATUS_PAID, 'Paid'),
    ]

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='payrolls')
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveSmallIntegerField(validators=YEAR_VALIDATORS)
    basic_salary = money_field()
    # every earning on top of the basic
    allowances = money_field()
    deductions = money_field()
    net_salary = money_field()
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('employee', 'month', 'year')
        ordering = ['-year', '-month']

    def __str__(self):
        return f"{self.employee.employee_id} {self.year}-{self.month:02d}"


class PayrollInput(models.Model):
    STATUS_DRAFT = 'DRAFT'
    STATUS_PENDING_APPROVAL = 'PENDING_APPROVAL'
    STATUS_APPROVED = 'APPROVED'
    STATUS_PROCESSED = 'PROCESSED'
    STATUS_REJECTED = 'REJECTED'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_PENDING_APPROVAL, 'Pending Approval'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_PROCESSED, 'Processed'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    payroll = models.OneToOneField(
        Payroll, on_delete=models.CASCADE, related_name='input')
    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='payroll_inputs')
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveSmallIntegerField(validators=YEAR_VALIDATORS)

    basic_salary = money_field()
    hra = money_field()
    variable_pay = money_field()
    overtime = money_field()
    bonus = money_field()
    allowances = money_field()
    total_earnings = money_field()

    pf = money_field()
    esi = money_field()
    tax = money_field()
    insurance = money_field()
    leave_deduction = money_field()
    other_deductions = money_field()
    total_deductions = money_field()

    working_days = models.PositiveSmallIntegerField(default=0)
    present_days = models.DecimalField(max_digits=5, decimal_places=1, default=0)
    leave_days = models.DecimalField(max_digits=5, decimal_places=1, default=0)

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    notes = models.TextField(blank=True, default='')
    approved_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='approved_payroll_inputs')
    approved_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='processed_payroll_inputs')
    processed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', '-month']

    def __str__(self):
        return f"Input {self.employee.employee_id} {self.year}-{self.month:02d}"


class VariablePayEntry(models.Model):
    TYPE_CHOICES = [
        ('PERFORMANCE_BONUS', 'Performance Bonus'),
        ('COMMISSION', 'Commission'),
        ('OVERTIME', 'Overtime'),
        ('INCENTIVE', 'Incentive'),
        ('ARREARS', 'Arrears'),
        ('RETROACTIVE', 'Retroactive'),
        ('OTHER', 'Other'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='variable_pay_entries')
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveSmallIntegerField(validators=YEAR_VALIDATORS)
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    submitted_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='submitted_variable_pay')
    approved_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='approved_variable_pay')
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='rejected_variable_pay')
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'variable pay entries'

    def __str__(self):
        return f"{self.employee.employee_id} {self.type} {self.amount}"


class Payslip(models.Model):
    STATUS_GENERATED = 'GENERATED'
    STATUS_DOWNLOADED = 'DOWNLOADED'
    STATUS_ARCHIVED = 'ARCHIVED'

    STATUS_CHOICES = [
        (STATUS_GENERATED, 'Generated'),
        (STATUS_DOWNLOADED, 'Downloaded'),
        (STATUS_ARCHIVED, 'Archived'),
    ]

    payroll = models.OneToOneField(
        Payroll, on_delete=models.CASCADE, related_name='payslip')
    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='payslips')
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveSmallIntegerField(validators=YEAR_VALIDATORS)
    file_name = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_GENERATED)
    generated_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='generated_payslips')
    generated_at = models.DateTimeField(auto_now_add=True)
    downloaded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-year', '-month']

    def __str__(self):
        return self.file_name


class PayrollCorrectionRequest(models.Model):
    TYPE_CHOICES = [
        ('SALARY_DISPUTE', 'Salary Dispute'),
        ('ATTENDANCE_DISPUTE', 'Attendance Dispute'),
        ('DEDUCTION_ERROR', 'Deduction Error'),
        ('ALLOWANCE_MISSING', 'Allowance Missing'),
        ('OTHER', 'Other'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_UNDER_REVIEW = 'UNDER_REVIEW'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_RESOLVED = 'RESOLVED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_UNDER_REVIEW, 'Under Review'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_RESOLVED, 'Resolved'),
    ]

    OPEN_STATUSES = (STATUS_PENDING, STATUS_UNDER_REVIEW)

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='payroll_corrections')
    payroll = models.ForeignKey(
        Payroll, on_delete=models.CASCADE, related_name='corrections')
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    description = models.TextField()
    requested_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    requested_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='requested_payroll_corrections')
    reviewed_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='reviewed_payroll_corrections')
    reviewed_at = models.DateTimeField(null=True, blank=True)
    review_comments = models.TextField(blank=True, default='')
    resolution = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.employee.employee_id} {self.type} ({self.status})"


class PayrollAuditLog(models.Model):
    payroll = models.ForeignKey(
        Payroll, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='audit_logs')
    employee = models.ForeignKey(
        Employee, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='payroll_audit_logs')
    action = models.CharField(max_length=60)
    details = models.JSONField(default=dict, blank=True)
    performed_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='payroll_audit_logs')
    performed_at = models.DateTimeField(auto_now_add=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        ordering = ['-performed_at']

    def __str__(self):
        return f"{self.action} @ {self.performed_at:%Y-%m-%d %H:%M}"
