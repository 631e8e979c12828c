# employees/serializers.py
from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.db import transaction

from .constants import ADMIN_FIELDS, CONTACT_FIELDS, MANAGER_FIELDS
from .models import Department, Employee
from .utils import generate_employee_id, generate_username

User = get_user_model()


class DepartmentSerializer(serializers.ModelSerializer):
    employee_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Department
        fields = ('id', 'name', 'description', 'is_active',
                  'employee_count', 'created_at')
        read_only_fields = ('id', 'created_at')

    def validate_name(self, value):
        value = value.strip()
        qs = Department.objects.filter(name__iexact=value)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError(
                "Department with this name already exists.")
        return value


class EmployeeSummarySerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='full_name', read_only=True)
    department_name = serializers.CharField(
        source='department.name', read_only=True)

    class Meta:
        model = Employee
        fields = ('id', 'employee_id', 'name', 'position', 'department_name')


class EmployeeReadSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    role = serializers.CharField(source='user.role', read_only=True)
    department_name = serializers.CharField(
        source='department.name', read_only=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Employee
        fields = (
            'id', 'user', 'employee_id', 'first_name', 'last_name',
            'full_name', 'email', 'username', 'role',
            'date_of_birth', 'phone_number', 'address',
            'emergency_contact', 'emergency_phone', 'profile_photo',
            'department', 'department_name', 'position', 'employment_type',
            'hire_date', 'exit_date', 'salary', 'metadata', 'is_active',
            'created_at', 'updated_at',
        )


class EmployeeCreateSerializer(serializers.ModelSerializer):
    email = serializers.EmailField()
    username = serializers.CharField(
        required=False, allow_blank=True, max_length=150)
    password = serializers.CharField(
        required=False, allow_blank=True, write_only=True, min_length=6)
    role = serializers.ChoiceField(
        choices=User.ROLE_CHOICES, default=User.ROLE_EMPLOYEE)
    employee_id = serializers.CharField(
        required=False, allow_blank=True, max_length=30)

    class Meta:
        model = Employee
        fields = (
            'email', 'username', 'password', 'role', 'employee_id',
            'first_name', 'last_name', 'date_of_birth', 'phone_number',
            'address', 'emergency_contact', 'emergency_phone',
            'department', 'position', 'employment_type', 'hire_date',
            'salary', 'metadata',
        )

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(
                "User with this email already exists.")
        return value.lower()

    def validate_username(self, value):
        if value and User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError(
                "User with this username already exists.")
        return value

    def validate_employee_id(self, value):
        if value and Employee.objects.filter(employee_id=value).exists():
            raise serializers.ValidationError(
                "Employee with this ID already exists.")
        return value

    def validate_salary(self, value):
        if value <= 0:
            raise serializers.ValidationError("Salary must be positive.")
        return value

    def validate_department(self, value):
        if not value.is_active:
            raise serializers.ValidationError("Department is inactive.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        email = validated_data.pop('email')
        username = validated_data.pop('username', '') or generate_username(
            validated_data['first_name'], validated_data['last_name'])
        password = validated_data.pop('password', '')
        role = validated_data.pop('role', User.ROLE_EMPLOYEE)

        user = User.objects.create_user(
            username=username,
            email=email,
            first_name=validated_data['first_name'],
            last_name=validated_data['last_name'],
            role=role,
        )
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save()

        if not validated_data.get('employee_id'):
            validated_data['employee_id'] = generate_employee_id()

        return Employee.objects.create(user=user, **validated_data)


class EmployeeContactUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = CONTACT_FIELDS


class EmployeeManagerUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = MANAGER_FIELDS

    def validate(self, data):
        hire_date = data.get('hire_date', self.instance.hire_date)
        exit_date = data.get('exit_date', self.instance.exit_date)
        if exit_date and hire_date and exit_date < hire_date:
            raise serializers.ValidationError(
                {"exit_date": "Exit date cannot be before hire date."})
        return data


class EmployeeAdminUpdateSerializer(EmployeeManagerUpdateSerializer):
    class Meta(EmployeeManagerUpdateSerializer.Meta):
        fields = ADMIN_FIELDS

    def validate_salary(self, value):
        if value <= 0:
            raise serializers.ValidationError("Salary must be positive.")
        return value
