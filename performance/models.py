# performance/models.py
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from employees.models import Employee

User = settings.AUTH_USER_MODEL

PROGRESS_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]


class ReviewCycle(models.Model):
    TYPE_CHOICES = [
        ('MID_YEAR', 'Mid Year'),
        ('ANNUAL', 'Annual'),
        ('QUARTERLY', 'Quarterly'),
        ('PROJECT_BASED', 'Project Based'),
    ]

    STATUS_DRAFT = 'DRAFT'
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    name = models.CharField(max_length=150)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='review_cycles')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-start_date']

    def __str__(self):
        return self.name


class PerformanceGoal(models.Model):
    CATEGORY_CHOICES = [
        ('PERFORMANCE', 'Performance'),
        ('DEVELOPMENT', 'Development'),
        ('BEHAVIORAL', 'Behavioral'),
        ('PROJECT', 'Project'),
        ('SKILL', 'Skill'),
        ('OTHER', 'Other'),
    ]

    PRIORITY_CHOICES = [
        ('LOW', 'Low'),
        ('MEDIUM', 'Medium'),
        ('HIGH', 'High'),
        ('CRITICAL', 'Critical'),
    ]

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_ON_HOLD = 'ON_HOLD'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_ON_HOLD, 'On Hold'),
    ]

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='goals')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    target = models.TextField(blank=True, default='')
    category = models.CharField(
        max_length=20, choices=CATEGORY_CHOICES, default='PERFORMANCE')
    priority = models.CharField(
        max_length=10, choices=PRIORITY_CHOICES, default='MEDIUM')
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    start_date = models.DateField()
    end_date = models.DateField()
    progress = models.PositiveSmallIntegerField(
        default=0, validators=PROGRESS_VALIDATORS)
    completion_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def mark_completed(self):
        self.status = self.STATUS_COMPLETED
        self.progress = 100
        if not self.completion_date:
            self.completion_date = timezone.localdate()

    def __str__(self):
        return f"{self.employee.employee_id}: {self.title}"


class GoalUpdate(models.Model):
    goal = models.ForeignKey(
        PerformanceGoal, on_delete=models.CASCADE, related_name='updates')
    update_text = models.TextField()
    progress = models.PositiveSmallIntegerField(validators=PROGRESS_VALIDATORS)
    updated_by = models.ForeignKey(
        User, null=True, on_delete=models.SET_NULL, related_name='goal_updates')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']


class PerformanceReview(models.Model):
    REVIEW_TYPE_CHOICES = ReviewCycle.TYPE_CHOICES

    RATING_CHOICES = [
        ('EXCEEDS_EXPECTATIONS', 'Exceeds Expectations'),
        ('MEETS_EXPECTATIONS', 'Meets Expectations'),
        ('BELOW_EXPECTATIONS', 'Below Expectations'),
        ('NEEDS_IMPROVEMENT', 'Needs Improvement'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='performance_reviews')
    goal = models.ForeignKey(
        PerformanceGoal, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='reviews')
    cycle = models.ForeignKey(
        ReviewCycle, on_delete=models.PROTECT, related_name='reviews')
    review_type = models.CharField(max_length=20, choices=REVIEW_TYPE_CHOICES)
    rating = models.CharField(
        max_length=30, choices=RATING_CHOICES, blank=True, default='')
    comments = models.TextField(blank=True, default='')
    strengths = models.TextField(blank=True, default='')
    improvements = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    reviewed_by = models.ForeignKey(
        User, null=True, on_delete=models.SET_NULL,
        related_name='performance_reviews_given')
    reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.employee.employee_id} {self.cycle.name} ({self.status})"
