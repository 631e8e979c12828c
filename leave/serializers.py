from rest_framework import serializers

from employees.models import Employee
from .models import LeaveRequest


class LeaveRequestSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True)
    approved_by_name = serializers.CharField(
        source='approved_by.display_name', read_only=True, default=None)
    days = serializers.IntegerField(read_only=True)

    class Meta:
        model = LeaveRequest
        fields = (
            'id', 'employee', 'employee_name', 'employee_code', 'leave_type',
            'start_date', 'end_date', 'days', 'reason', 'status',
            'approved_by', 'approved_by_name', 'approved_at', 'comments',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class LeaveApplySerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.filter(is_active=True), required=False)
    leave_type = serializers.ChoiceField(choices=LeaveRequest.TYPE_CHOICES)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField()

    def validate_reason(self, value):
        value = value.strip()
        if len(value) < 10:
            raise serializers.ValidationError(
                "Reason must be at least 10 characters.")
        return value

    def validate(self, data):
        if data['end_date'] < data['start_date']:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date."})
        return data


class LeaveActionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        LeaveRequest.STATUS_APPROVED,
        LeaveRequest.STATUS_REJECTED,
        LeaveRequest.STATUS_CANCELLED,
    ])
    comments = serializers.CharField(required=False, allow_blank=True)
