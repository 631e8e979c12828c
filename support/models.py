from django.db import models
from django.conf import settings

from employees.models import Employee
from . import workflow

User = settings.AUTH_USER_MODEL


class EmployeeRequest(models.Model):
    STATUS_CHOICES = workflow.STATUS_CHOICES
    CATEGORY_CHOICES = workflow.CATEGORY_CHOICES

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='requests'
    )

    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField()

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=workflow.OPEN
    )

    assigned_to = models.ForeignKey(
        User, null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='assigned_requests'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def owner_id(self):
        return self.employee.user_id

    def __str__(self):
        return f"#{self.id} {self.title}"


class RequestComment(models.Model):
    request = models.ForeignKey(
        EmployeeRequest,
        on_delete=models.CASCADE,
        related_name='comments'
    )

    author = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='request_comments'
    )

    comment = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']
