from django.contrib import admin
from .models import (
    Payroll,
    PayrollAuditLog,
    PayrollCorrectionRequest,
    PayrollCycle,
    PayrollInput,
    Payslip,
    VariablePayEntry,
)


@admin.register(PayrollCycle)
class PayrollCycleAdmin(admin.ModelAdmin):
    list_display = ('year', 'month', 'status', 'created_by', 'created_at')
    list_filter = ('status', 'year')


@admin.register(Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = ('employee', 'year', 'month', 'basic_salary',
                    'net_salary', 'status', 'paid_at')
    list_filter = ('status', 'year', 'month')
    search_fields = ('employee__employee_id', 'employee__first_name',
                     'employee__last_name')


@admin.register(PayrollInput)
class PayrollInputAdmin(admin.ModelAdmin):
    list_display = ('employee', 'year', 'month', 'total_earnings',
                    'total_deductions', 'status')
    list_filter = ('status', 'year', 'month')
    search_fields = ('employee__employee_id',)


@admin.register(VariablePayEntry)
class VariablePayEntryAdmin(admin.ModelAdmin):
    list_display = ('employee', 'type', 'amount', 'year', 'month', 'status')
    list_filter = ('status', 'type')
    search_fields = ('employee__employee_id', 'employee__first_name')


@admin.register(Payslip)
class PayslipAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'employee', 'status', 'generated_at', 'downloaded_at')
    list_filter = ('status',)


@admin.register(PayrollCorrectionRequest)
class PayrollCorrectionRequestAdmin(admin.ModelAdmin):
    list_display = ('employee', 'type', 'status', 'requested_amount', 'created_at')
    list_filter = ('status', 'type')


@admin.register(PayrollAuditLog)
class PayrollAuditLogAdmin(admin.ModelAdmin):
    list_display = ('action', 'performed_by', 'employee', 'performed_at', 'ip_address')
    list_filter = ('action',)
    readonly_fields = ('action', 'payroll', 'employee', 'details', 'performed_by',
                       'performed_at', 'ip_address', 'user_agent')
