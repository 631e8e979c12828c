from django.utils import timezone
from rest_framework import serializers

from .models import Attendance, AttendanceRegularizationRequest


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True)
    work_hours = serializers.FloatField(read_only=True)

    class Meta:
        model = Attendance
        fields = (
            'id', 'employee', 'employee_name', 'employee_code', 'date',
            'check_in', 'check_out', 'work_hours', 'status',
            'check_in_location', 'check_out_location', 'notes',
            'is_regularized', 'regularized_by', 'regularized_at',
        )
        read_only_fields = fields


class AttendanceActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=[('checkin', 'Check in'),
                                              ('checkout', 'Check out')])
    location = serializers.CharField(
        required=False, allow_blank=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)


class AttendanceCorrectionSerializer(serializers.Serializer):
    check_in = serializers.DateTimeField(required=False)
    check_out = serializers.DateTimeField(required=False)
    status = serializers.ChoiceField(
        choices=Attendance.STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        if not any(data.get(k) for k in ('check_in', 'check_out', 'status')):
            raise serializers.ValidationError(
                "Provide check_in, check_out or status to correct.")
        return data


class RegularizationSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    reviewed_by_name = serializers.CharField(
        source='reviewed_by.display_name', read_only=True, default=None)

    class Meta:
        model = AttendanceRegularizationRequest
        fields = (
            'id', 'employee', 'employee_name', 'date', 'reason', 'status',
            'reviewed_by', 'reviewed_by_name', 'reviewed_at',
            'review_comments', 'created_at',
        )
        read_only_fields = (
            'id', 'employee', 'status', 'reviewed_by', 'reviewed_at',
            'review_comments', 'created_at',
        )

    def validate_date(self, value):
        if value > timezone.localdate():
            raise serializers.ValidationError(
                "Cannot regularize a future date.")
        return value

    def validate_reason(self, value):
        if len(value.strip()) < 5:
            raise serializers.ValidationError(
                "Reason must be at least 5 characters.")
        return value.strip()

    def validate(self, data):
        employee = self.context['employee']
        if AttendanceRegularizationRequest.objects.filter(
            employee=employee,
            date=data['date'],
            status=AttendanceRegularizationRequest.STATUS_PENDING,
        ).exists():
            raise serializers.ValidationError(
                {"date": "A pending regularization request already exists for this date."})
        return data

    def create(self, validated_data):
        return AttendanceRegularizationRequest.objects.create(
            employee=self.context['employee'], **validated_data)


class RegularizationReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        AttendanceRegularizationRequest.STATUS_APPROVED,
        AttendanceRegularizationRequest.STATUS_REJECTED,
    ])
    review_comments = serializers.CharField(required=False, allow_blank=True)
