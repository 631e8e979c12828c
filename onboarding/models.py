# onboarding/models.py
from django.conf import settings
from django.db import models

from employees.constants import EMPLOYMENT_TYPE_CHOICES
from employees.models import Department, Employee

User = settings.AUTH_USER_MODEL


class OnboardingSubmission(models.Model):
    PAY_FREQUENCY_CHOICES = [
        ('MONTHLY', 'Monthly'),
        ('WEEKLY', 'Weekly'),
        ('BIWEEKLY', 'Bi-weekly'),
        ('ANNUAL', 'Annual'),
    ]

    STATUS_CREATED = 'CREATED'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (STATUS_CREATED, 'Created'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name='onboarding')
    email = models.EmailField()
    department = models.ForeignKey(
        Department, on_delete=models.PROTECT, related_name='onboardings')
    position = models.CharField(max_length=150)
    employment_type = models.CharField(
        max_length=20, choices=EMPLOYMENT_TYPE_CHOICES, default='FULL_TIME')
    date_of_joining = models.DateField()
    salary = models.DecimalField(max_digits=12, decimal_places=2)
    pay_frequency = models.CharField(
        max_length=20, choices=PAY_FREQUENCY_CHOICES, default='MONTHLY')
    pf_number = models.CharField(max_length=50, blank=True, default='')
    esic_number = models.CharField(max_length=50, blank=True, default='')

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_CREATED)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='created_onboardings')
    completed_at = models.DateTimeField(null=True, blank=True)
    employee = models.OneToOneField(
        Employee, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='onboarding')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.email} ({self.status})"


class OnboardingStep(models.Model):
    PERSONAL_INFORMATION = 'PERSONAL_INFORMATION'
    DOCUMENTS = 'DOCUMENTS'
    PREVIOUS_EMPLOYMENT = 'PREVIOUS_EMPLOYMENT'
    BANKING_DETAILS = 'BANKING_DETAILS'
    BACKGROUND_VERIFICATION = 'BACKGROUND_VERIFICATION'

    STEP_TYPE_CHOICES = [
        (PERSONAL_INFORMATION, 'Personal Information'),
        (DOCUMENTS, 'Documents'),
        (PREVIOUS_EMPLOYMENT, 'Previous Employment'),
        (BANKING_DETAILS, 'Banking Details'),
        (BACKGROUND_VERIFICATION, 'Background Verification'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_SUBMITTED = 'SUBMITTED'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_CHANGES_REQUESTED = 'CHANGES_REQUESTED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_SUBMITTED, 'Submitted'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_CHANGES_REQUESTED, 'Changes Requested'),
    ]

    submission = models.ForeignKey(
        OnboardingSubmission, on_delete=models.CASCADE, related_name='steps')
    step_type = models.CharField(max_length=40, choices=STEP_TYPE_CHOICES)
    step_data = models.JSONField(default=dict, blank=True)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    submitted_at = models.DateTimeField(null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='reviewed_onboarding_steps')
    review_comments = models.TextField(blank=True, default='')
    rejection_reason = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('submission', 'step_type')
        ordering = ['id']

    def __str__(self):
        return f"{self.submission.email} {self.step_type} ({self.status})"
