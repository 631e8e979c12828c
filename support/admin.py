from django.contrib import admin
from .models import EmployeeRequest, RequestComment


class RequestCommentInline(admin.TabularInline):
    model = RequestComment
    extra = 0
    readonly_fields = ('author', 'created_at')


@admin.register(EmployeeRequest)
class EmployeeRequestAdmin(admin.ModelAdmin):
    list_display = ('title', 'employee', 'category', 'status', 'assigned_to', 'created_at')
    list_filter = ('status', 'category')
    search_fields = ('title', 'employee__employee_id', 'employee__first_name')
    inlines = [RequestCommentInline]
