# onboarding/services.py
import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from employees.models import Employee
from employees.utils import generate_employee_id
from .models import OnboardingStep, OnboardingSubmission

logger = logging.getLogger(__name__)
User = get_user_model()

STEP_ORDER = [choice for choice, _ in OnboardingStep.STEP_TYPE_CHOICES]


def _split_name(name):
    first, _, last = name.partition(" ")
    return first, last


def create_steps(submission):
    OnboardingStep.objects.bulk_create([
        OnboardingStep(submission=submission, step_type=step_type)
        for step_type in STEP_ORDER
    ])


class OnboardingService:

    @staticmethod
    @transaction.atomic
    def create(data, created_by):
        first_name, last_name = _split_name(data['name'])
        user = User.objects.create_user(
            username=data['username'],
            email=data['email'],
            password=data['password'],
            first_name=first_name,
            last_name=last_name,
            role=User.ROLE_EMPLOYEE,
            is_active=False,
        )
        submission = OnboardingSubmission.objects.create(
            user=user,
            email=data['email'],
            department=data['department'],
            position=data['position'],
            employment_type=data['employment_type'],
            date_of_joining=data['date_of_joining'],
            salary=data['salary'],
            pay_frequency=data['pay_frequency'],
            pf_number=data.get('pf_number', ''),
            esic_number=data.get('esic_number', ''),
            created_by=created_by,
        )
        create_steps(submission)
        logger.info("Onboarding created: submission=%s user=%s by user=%s",
                    submission.id, user.username, created_by.id)
        return submission

    @staticmethod
    @transaction.atomic
    def submit_step(step, step_data):
        submission = step.submission
        if submission.status in (OnboardingSubmission.STATUS_COMPLETED,
                                 OnboardingSubmission.STATUS_CANCELLED):
            raise ValidationError(
                f"Onboarding is {submission.status.lower()}.")
        if step.status == OnboardingStep.STATUS_APPROVED:
            raise ValidationError("Approved steps cannot be changed.")

        step.step_data = step_data
        step.status = OnboardingStep.STATUS_SUBMITTED
        step.submitted_at = timezone.now()
        step.save(update_fields=['step_data', 'status', 'submitted_at', 'updated_at'])

        if submission.status == OnboardingSubmission.STATUS_CREATED:
            submission.status = OnboardingSubmission.STATUS_IN_PROGRESS
            submission.save(update_fields=['status', 'updated_at'])
        return step

    @staticmethod
    @transaction.atomic
    def review_step(step, reviewer, status, comments='', rejection_reason=''):
        submission = OnboardingSubmission.objects.select_for_update().get(
            pk=step.submission_id)
        if submission.status in (OnboardingSubmission.STATUS_COMPLETED,
                                 OnboardingSubmission.STATUS_CANCELLED):
            raise ValidationError(
                f"Onboarding is {submission.status.lower()}.")
        if step.status != OnboardingStep.STATUS_SUBMITTED:
            raise ValidationError("Step is not in submitted status.")

        step.status = status
        step.reviewed_at = timezone.now()
        step.reviewed_by = reviewer
        step.review_comments = comments or ''
        step.rejection_reason = rejection_reason or ''
        step.save()

        statuses = list(submission.steps.values_list('status', flat=True))
        if statuses and all(s == OnboardingStep.STATUS_APPROVED for s in statuses):
            OnboardingService.complete(submission)
        return step

    @staticmethod
    def complete(submission):
        """Activates the user and creates their employee record."""
        personal = submission.steps.filter(
            step_type=OnboardingStep.PERSONAL_INFORMATION).first()
        info = personal.step_data if personal else {}
        user = submission.user

        employee = Employee.objects.filter(user=user).first()
        if employee is None:
            employee = Employee.objects.create(
                user=user,
                employee_id=generate_employee_id(),
                first_name=info.get('first_name') or user.first_name or user.username,
                last_name=info.get('last_name') or user.last_name,
                date_of_birth=parse_date(info.get('date_of_birth') or ''),
                phone_number=info.get('phone_number', ''),
                address=info.get('address', ''),
                emergency_contact=info.get('emergency_contact_name', ''),
                emergency_phone=info.get('emergency_contact_phone', ''),
                department=submission.department,
                position=submission.position,
                employment_type=submission.employment_type,
                hire_date=submission.date_of_joining,
                salary=submission.salary,
            )

        user.is_active = True
        user.save(update_fields=['is_active'])

        submission.status = OnboardingSubmission.STATUS_COMPLETED
        submission.completed_at = timezone.now()
        submission.employee = employee
        submission.save(update_fields=['status', 'completed_at', 'employee', 'updated_at'])

        logger.info("Onboarding completed: submission=%s employee=%s",
                    submission.id, employee.employee_id)
        return employee

    @staticmethod
    def cancel(submission, user):
        if submission.status == OnboardingSubmission.STATUS_COMPLETED:
            raise ValidationError("Completed onboarding cannot be cancelled.")
        if submission.status == OnboardingSubmission.STATUS_CANCELLED:
            raise ValidationError("Onboarding is already cancelled.")

        submission.status = OnboardingSubmission.STATUS_CANCELLED
        submission.save(update_fields=['status', 'updated_at'])
        logger.info("Onboarding cancelled: submission=%s by user=%s",
                    submission.id, user.id)
        return submission

    @staticmethod
    def backfill(created_by):
        """
        Gives every employee without an onboarding record a fresh
        submission with pending steps.
        """
        employees = list(Employee.objects.select_related('user', 'department').filter(
            onboarding__isnull=True, user__onboarding__isnull=True))

        created = 0
        for employee in employees:
            try:
                with transaction.atomic():
                    submission = OnboardingSubmission.objects.create(
                        user=employee.user,
                        email=employee.user.email,
                        department=employee.department,
                        position=employee.position,
                        employment_type=employee.employment_type,
                        date_of_joining=employee.hire_date,
                        salary=employee.salary,
                        created_by=created_by,
                        employee=employee,
                    )
                    create_steps(submission)
            except DatabaseError:
                logger.exception("Onboarding backfill failed: employee=%s",
                                 employee.employee_id)
                continue
            created += 1

        processed = len(employees)

        logger.info("Onboarding backfill: processed=%s created=%s", processed, created)
        return processed, created
