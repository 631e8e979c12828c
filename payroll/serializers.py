# payroll/serializers.py
from rest_framework import serializers

from employees.models import Employee
from .constants import EXPORT_FORMATS, MAX_PAYROLL_YEAR, MIN_PAYROLL_YEAR
from .models import (
    Payroll,
    PayrollAuditLog,
    PayrollCorrectionRequest,
    PayrollCycle,
    PayrollInput,
    Payslip,
    VariablePayEntry,
)


class PeriodSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(
        min_value=MIN_PAYROLL_YEAR, max_value=MAX_PAYROLL_YEAR)


class CalculationOptionsMixin(serializers.Serializer):
    include_variable_pay = serializers.BooleanField(default=True)
    include_attendance = serializers.BooleanField(default=True)
    include_statutory_deductions = serializers.BooleanField(default=True)
    prorate = serializers.BooleanField(default=True)


class PayrollCalculateSerializer(PeriodSerializer, CalculationOptionsMixin):
    employee_id = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), source='employee')


class PayrollProcessSerializer(PeriodSerializer, CalculationOptionsMixin):
    employee_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, allow_empty=True)


class PayrollSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True)
    department_name = serializers.CharField(
        source='employee.department.name', read_only=True)

    class Meta:
        model = Payroll
        fields = (
            'id', 'employee', 'employee_name', 'employee_code',
            'department_name', 'month', 'year', 'basic_salary', 'allowances',
            'deductions', 'net_salary', 'status', 'paid_at',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class PayrollStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payroll.STATUS_CHOICES)


class PayrollCycleSerializer(serializers.ModelSerializer):
    employee_count = serializers.IntegerField(read_only=True, default=0)
    total_net = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True, default=0)
    created_by_name = serializers.CharField(
        source='created_by.display_name', read_only=True, default=None)

    class Meta:
        model = PayrollCycle
        fields = (
            'id', 'month', 'year', 'status', 'notes', 'created_by',
            'created_by_name', 'employee_count', 'total_net',
            'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'created_by', 'created_at', 'updated_at')


class PayrollCycleCreateSerializer(PeriodSerializer):
    notes = serializers.CharField(required=False, allow_blank=True)


class PayrollCycleUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=PayrollCycle.STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class PayrollInputSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True)
    approved_by_name = serializers.CharField(
        source='approved_by.display_name', read_only=True, default=None)
    processed_by_name = serializers.CharField(
        source='processed_by.display_name', read_only=True, default=None)

    class Meta:
        model = PayrollInput
        fields = '__all__'
        read_only_fields = [f.name for f in PayrollInput._meta.fields]


class PayrollInputUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        PayrollInput.STATUS_PENDING_APPROVAL,
        PayrollInput.STATUS_APPROVED,
        PayrollInput.STATUS_REJECTED,
    ], required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class VariablePayEntrySerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    submitted_by_name = serializers.CharField(
        source='submitted_by.display_name', read_only=True, default=None)
    approved_by_name = serializers.CharField(
        source='approved_by.display_name', read_only=True, default=None)

    class Meta:
        model = VariablePayEntry
        fields = (
            'id', 'employee', 'employee_name', 'month', 'year', 'type',
            'amount', 'description', 'status', 'submitted_by',
            'submitted_by_name', 'approved_by', 'approved_by_name',
            'approved_at', 'rejected_by', 'rejected_at', 'rejection_reason',
            'created_at',
        )
        read_only_fields = (
            'id', 'status', 'submitted_by', 'approved_by', 'approved_at',
            'rejected_by', 'rejected_at', 'rejection_reason', 'created_at',
        )

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero.")
        return value


class VariablePayDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        VariablePayEntry.STATUS_APPROVED,
        VariablePayEntry.STATUS_REJECTED,
    ])
    rejection_reason = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        if (data['status'] == VariablePayEntry.STATUS_REJECTED
                and not (data.get('rejection_reason') or '').strip()):
            raise serializers.ValidationError(
                {"rejection_reason": "A reason is required when rejecting."})
        return data


class PayslipSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True)
    net_salary = serializers.DecimalField(
        source='payroll.net_salary', max_digits=12, decimal_places=2,
        read_only=True)

    class Meta:
        model = Payslip
        fields = (
            'id', 'payroll', 'employee', 'employee_name', 'employee_code',
            'month', 'year', 'file_name', 'status', 'net_salary',
            'generated_by', 'generated_at', 'downloaded_at',
        )
        read_only_fields = fields


class PayslipGenerateSerializer(serializers.Serializer):
    payroll_id = serializers.IntegerField(required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    year = serializers.IntegerField(
        min_value=MIN_PAYROLL_YEAR, max_value=MAX_PAYROLL_YEAR, required=False)

    def validate(self, data):
        if not data.get('payroll_id') and not (data.get('month') and data.get('year')):
            raise serializers.ValidationError(
                "Provide payroll_id or both month and year.")
        return data


class CorrectionRequestSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    reviewed_by_name = serializers.CharField(
        source='reviewed_by.display_name', read_only=True, default=None)
    month = serializers.IntegerField(source='payroll.month', read_only=True)
    year = serializers.IntegerField(source='payroll.year', read_only=True)

    class Meta:
        model = PayrollCorrectionRequest
        fields = (
            'id', 'employee', 'employee_name', 'payroll', 'month', 'year',
            'type', 'description', 'requested_amount', 'status',
            'requested_by', 'reviewed_by', 'reviewed_by_name', 'reviewed_at',
            'review_comments', 'resolution', 'created_at', 'updated_at',
        )
        read_only_fields = (
            'id', 'employee', 'status', 'requested_by', 'reviewed_by',
            'reviewed_at', 'review_comments', 'resolution',
            'created_at', 'updated_at',
        )

    def validate_description(self, value):
        value = value.strip()
        if len(value) < 10:
            raise serializers.ValidationError(
                "Description must be at least 10 characters.")
        return value


class CorrectionReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        PayrollCorrectionRequest.STATUS_UNDER_REVIEW,
        PayrollCorrectionRequest.STATUS_APPROVED,
        PayrollCorrectionRequest.STATUS_REJECTED,
        PayrollCorrectionRequest.STATUS_RESOLVED,
    ], required=False)
    review_comments = serializers.CharField(required=False, allow_blank=True)
    resolution = serializers.CharField(required=False, allow_blank=True)


class PayrollAuditLogSerializer(serializers.ModelSerializer):
    performed_by_name = serializers.CharField(
        source='performed_by.display_name', read_only=True, default=None)

    class Meta:
        model = PayrollAuditLog
        fields = ('id', 'action', 'payroll', 'employee', 'details',
                  'performed_by', 'performed_by_name', 'performed_at')


class ExportQuerySerializer(PeriodSerializer):
    format = serializers.ChoiceField(choices=EXPORT_FORMATS)
    department = serializers.IntegerField(required=False)
    status = serializers.CharField(required=False, allow_blank=True)
