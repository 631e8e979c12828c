from django.db import models
from django.conf import settings
from django.utils import timezone

from employees.models import Employee

User = settings.AUTH_USER_MODEL


class LeaveRequest(models.Model):
    TYPE_CHOICES = [
        ('SICK_LEAVE', 'Sick Leave'),
        ('VACATION', 'Vacation'),
        ('PERSONAL_LEAVE', 'Personal Leave'),
        ('MATERNITY_LEAVE', 'Maternity Leave'),
        ('PATERNITY_LEAVE', 'Paternity Leave'),
        ('EMERGENCY_LEAVE', 'Emergency Leave'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='leave_requests')
    leave_type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField()
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    approved_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='decided_leaves')
    approved_at = models.DateTimeField(null=True, blank=True)
    comments = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def days(self):
        return (self.end_date - self.start_date).days + 1

    def apply_decision(self, approver_user, approve: bool, comments: str = None):
        self.approved_by = approver_user
        self.approved_at = timezone.now()
        self.comments = comments or ''
        if approve:
            self.status = self.STATUS_APPROVED
        else:
            self.status = self.STATUS_REJECTED
        self.save()

    def cancel(self, comments: str = None):
        self.status = self.STATUS_CANCELLED
        if comments:
            self.comments = comments
        self.save()

    def __str__(self):
        return f"{self.employee.employee_id} {self.leave_type} {self.start_date}..{self.end_date}"
