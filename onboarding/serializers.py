# onboarding/serializers.py
from django.contrib.auth import get_user_model
from rest_framework import serializers

from employees.constants import EMPLOYMENT_TYPE_CHOICES
from employees.models import Department
from .models import OnboardingStep, OnboardingSubmission

User = get_user_model()


class OnboardingCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    username = serializers.CharField(min_length=3, max_length=150)
    password = serializers.CharField(min_length=6, write_only=True)
    name = serializers.CharField(min_length=2, max_length=160)
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.filter(is_active=True))
    position = serializers.CharField(max_length=150)
    employment_type = serializers.ChoiceField(choices=EMPLOYMENT_TYPE_CHOICES)
    date_of_joining = serializers.DateField()
    salary = serializers.DecimalField(max_digits=12, decimal_places=2)
    pay_frequency = serializers.ChoiceField(
        choices=OnboardingSubmission.PAY_FREQUENCY_CHOICES)
    pf_number = serializers.CharField(required=False, allow_blank=True, max_length=50)
    esic_number = serializers.CharField(required=False, allow_blank=True, max_length=50)

    def validate_email(self, value):
        email = value.lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError(
                "User with this email already exists.")
        return email

    def validate_username(self, value):
        value = value.strip()
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError(
                "User with this username already exists.")
        return value

    def validate_name(self, value):
        value = " ".join(value.split())
        if len(value) < 2:
            raise serializers.ValidationError(
                "Name must be at least 2 characters.")
        return value

    def validate_salary(self, value):
        if value <= 0:
            raise serializers.ValidationError("Salary must be greater than zero.")
        return value


# Step payloads

class PersonalInformationSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=80)
    last_name = serializers.CharField(max_length=80)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(
        choices=['MALE', 'FEMALE', 'OTHER'], required=False)
    phone_number = serializers.CharField(min_length=10, max_length=20)
    address = serializers.CharField()
    emergency_contact_name = serializers.CharField(max_length=120)
    emergency_contact_phone = serializers.CharField(min_length=10, max_length=20)
    emergency_contact_relation = serializers.CharField(max_length=60)


class DocumentSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    reference = serializers.CharField(max_length=255)
    number = serializers.CharField(required=False, allow_blank=True, max_length=60)


class DocumentsSerializer(serializers.Serializer):
    documents = DocumentSerializer(many=True, allow_empty=False)


class EmployerSerializer(serializers.Serializer):
    company_name = serializers.CharField(max_length=150)
    job_title = serializers.CharField(max_length=150)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    is_current_job = serializers.BooleanField(default=False)
    reason_for_leaving = serializers.CharField(required=False, allow_blank=True)
    supervisor_name = serializers.CharField(required=False, allow_blank=True)
    supervisor_contact = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        end = data.get('end_date')
        if end is None and not data.get('is_current_job'):
            raise serializers.ValidationError(
                {"end_date": "End date is required for past employers."})
        if end is not None and end < data['start_date']:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date."})
        if not data.get('is_current_job') and not (data.get('reason_for_leaving') or '').strip():
            raise serializers.ValidationError(
                {"reason_for_leaving": "Reason for leaving is required."})
        return data


class PreviousEmploymentSerializer(serializers.Serializer):
    # freshers submit an empty list
    companies = EmployerSerializer(many=True, allow_empty=True)


class BankingDetailsSerializer(serializers.Serializer):
    bank_name = serializers.CharField(required=True, max_length=150)
    ifsc_code = serializers.CharField(required=True, max_length=20)
    account_number = serializers.CharField(required=True, max_length=50)
    confirm_account_number = serializers.CharField(
        required=True, max_length=50)
    account_holder_name = serializers.CharField(required=False, max_length=150)
    account_type = serializers.ChoiceField(
        choices=['SAVINGS', 'CURRENT'], default='SAVINGS')
    branch = serializers.CharField(required=True, max_length=150)

    def validate(self, data):
        if data.get('account_number') != data.get('confirm_account_number'):
            raise serializers.ValidationError(
                {"confirm_account_number": "Account numbers do not match."})
        return data


class BackgroundVerificationSerializer(serializers.Serializer):
    criminal_record_check = serializers.BooleanField(default=False)
    education_verification = serializers.BooleanField(default=False)
    employment_verification = serializers.BooleanField(default=False)
    reference_check = serializers.BooleanField(default=False)
    additional_information = serializers.CharField(required=False, allow_blank=True)
    consent_for_verification = serializers.BooleanField()

    def validate_consent_for_verification(self, value):
        if not value:
            raise serializers.ValidationError(
                "You must consent to background verification.")
        return value


STEP_DATA_SERIALIZERS = {
    OnboardingStep.PERSONAL_INFORMATION: PersonalInformationSerializer,
    OnboardingStep.DOCUMENTS: DocumentsSerializer,
    OnboardingStep.PREVIOUS_EMPLOYMENT: PreviousEmploymentSerializer,
    OnboardingStep.BANKING_DETAILS: BankingDetailsSerializer,
    OnboardingStep.BACKGROUND_VERIFICATION: BackgroundVerificationSerializer,
}


class StepSubmitSerializer(serializers.Serializer):
    step_data = serializers.DictField()

    def validate(self, data):
        step = self.context['step']
        payload_serializer = STEP_DATA_SERIALIZERS[step.step_type](
            data=data['step_data'])
        if not payload_serializer.is_valid():
            raise serializers.ValidationError({"step_data": payload_serializer.errors})
        # JSONField storage: dates and decimals go back to their wire form
        data['step_data'] = payload_serializer.to_representation(
            payload_serializer.validated_data)
        data['step_data'].pop('confirm_account_number', None)
        return data


class StepReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        OnboardingStep.STATUS_APPROVED,
        OnboardingStep.STATUS_REJECTED,
        OnboardingStep.STATUS_CHANGES_REQUESTED,
    ])
    comments = serializers.CharField(required=False, allow_blank=True)
    rejection_reason = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        if (data['status'] == OnboardingStep.STATUS_REJECTED
                and not (data.get('rejection_reason') or '').strip()):
            raise serializers.ValidationError(
                {"rejection_reason": "A reason is required when rejecting."})
        return data


class OnboardingStepSerializer(serializers.ModelSerializer):
    reviewed_by_name = serializers.CharField(
        source='reviewed_by.display_name', read_only=True, default=None)

    class Meta:
        model = OnboardingStep
        fields = (
            'id', 'submission', 'step_type', 'step_data', 'status',
            'submitted_at', 'reviewed_at', 'reviewed_by', 'reviewed_by_name',
            'review_comments', 'rejection_reason', 'updated_at',
        )
        read_only_fields = fields


class OnboardingSubmissionSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    name = serializers.CharField(source='user.display_name', read_only=True)
    department_name = serializers.CharField(
        source='department.name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True, default=None)
    steps = OnboardingStepSerializer(many=True, read_only=True)
    progress = serializers.SerializerMethodField()

    class Meta:
        model = OnboardingSubmission
        fields = (
            'id', 'user', 'username', 'name', 'email', 'department',
            'department_name', 'position', 'employment_type',
            'date_of_joining', 'salary', 'pay_frequency', 'pf_number',
            'esic_number', 'status', 'created_by', 'completed_at',
            'employee', 'employee_code', 'steps', 'progress',
            'created_at', 'updated_at',
        )
        read_only_fields = fields

    def get_progress(self, obj):
        steps = list(obj.steps.all())
        if not steps:
            return 0
        approved = sum(1 for s in steps if s.status == OnboardingStep.STATUS_APPROVED)
        return round(approved * 100 / len(steps))


class OnboardingLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)
