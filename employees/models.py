# employees/models.py
from django.db import models
from django.conf import settings

from .constants import EMPLOYMENT_TYPE_CHOICES
from .validators import validate_file_size, validate_image_content, validate_image_extension

User = settings.AUTH_USER_MODEL


class Department(models.Model):
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class EmployeeIDSequence(models.Model):
    last_value = models.PositiveIntegerField(default=0)


class Employee(models.Model):
    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name='employee')

    employee_id = models.CharField(max_length=30, unique=True)

    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)
    date_of_birth = models.DateField(null=True, blank=True)

    # Contact Information (Employee Editable)
    phone_number = models.CharField(max_length=20, blank=True, default='')
    address = models.TextField(blank=True, default='')
    emergency_contact = models.CharField(max_length=120, blank=True, default='')
    emergency_phone = models.CharField(max_length=20, blank=True, default='')

    profile_photo = models.ImageField(
        upload_to='profile_photos/',
        null=True,
        blank=True,
        validators=[validate_file_size, validate_image_extension, validate_image_content]
    )

    # Job Information
    department = models.ForeignKey(
        Department, on_delete=models.PROTECT, related_name='employees')
    position = models.CharField(max_length=150)
    employment_type = models.CharField(
        max_length=20, choices=EMPLOYMENT_TYPE_CHOICES, default='FULL_TIME')
    hire_date = models.DateField()
    exit_date = models.DateField(null=True, blank=True)
    # monthly basic
    salary = models.DecimalField(max_digits=12, decimal_places=2)

    metadata = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"{self.full_name()} ({self.employee_id})"
