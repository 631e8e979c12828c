# employees/admin.py
from django.contrib import admin
from .models import Department, Employee


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name',)


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('employee_id', 'full_name', 'department',
                    'position', 'hire_date', 'is_active')
    list_filter = ('department', 'employment_type', 'is_active')
    search_fields = ('employee_id', 'first_name', 'last_name', 'user__email')
