from django.contrib import admin
from .models import Attendance, AttendanceRegularizationRequest


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ('employee', 'date', 'check_in', 'check_out',
                    'status', 'is_regularized')
    list_filter = ('status', 'is_regularized', 'date')
    search_fields = ('employee__employee_id', 'employee__first_name',
                     'employee__last_name')


@admin.register(AttendanceRegularizationRequest)
class AttendanceRegularizationRequestAdmin(admin.ModelAdmin):
    list_display = ('employee', 'date', 'status', 'reviewed_by', 'reviewed_at')
    list_filter = ('status',)
    search_fields = ('employee__employee_id',)
