from django.contrib.auth import get_user_model
from rest_framework import serializers

from accounts.serializers import UserSerializer
from . import workflow
from .models import EmployeeRequest, RequestComment

User = get_user_model()


class EmployeeRequestCreateSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=1, max_length=255)

    class Meta:
        model = EmployeeRequest
        fields = ('category', 'title', 'description')

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required.")
        return value

    def validate_description(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Description is required.")
        return value

    def create(self, validated_data):
        employee = self.context['employee']
        return EmployeeRequest.objects.create(
            employee=employee,
            **validated_data
        )


class RequestCommentSerializer(serializers.ModelSerializer):
    author = UserSerializer(read_only=True)

    class Meta:
        model = RequestComment
        fields = ('id', 'author', 'comment', 'created_at')


class RequestCommentCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequestComment
        fields = ('comment',)

    def validate_comment(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment cannot be empty.")
        return value

    def create(self, validated_data):
        return RequestComment.objects.create(
            request=self.context['employee_request'],
            author=self.context['request'].user,
            comment=validated_data['comment']
        )


class EmployeeRequestSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True)
    assigned_user = UserSerializer(source='assigned_to', read_only=True)
    status_label = serializers.SerializerMethodField()
    category_label = serializers.SerializerMethodField()
    comment_count = serializers.SerializerMethodField()

    class Meta:
        model = EmployeeRequest
        fields = (
            'id', 'employee', 'employee_name', 'employee_code', 'category',
            'category_label', 'title', 'description', 'status',
            'status_label', 'assigned_to', 'assigned_user', 'comment_count',
            'created_at', 'updated_at',
        )

    def get_status_label(self, obj):
        return workflow.status_label(obj.status)

    def get_category_label(self, obj):
        return workflow.category_label(obj.category)

    def get_comment_count(self, obj):
        count = getattr(obj, 'comment_count', None)
        if count is None:
            count = obj.comments.count()
        return count


class EmployeeRequestDetailSerializer(EmployeeRequestSerializer):
    comments = RequestCommentSerializer(many=True, read_only=True)
    valid_next_statuses = serializers.SerializerMethodField()

    class Meta(EmployeeRequestSerializer.Meta):
        fields = EmployeeRequestSerializer.Meta.fields + (
            'comments', 'valid_next_statuses')

    def get_valid_next_statuses(self, obj):
        request = self.context.get('request')
        if request is None:
            return []
        return workflow.valid_next_statuses(obj.status, getattr(request.user, 'role', ''))


class EmployeeRequestUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=1, max_length=255, required=False)
    description = serializers.CharField(min_length=1, required=False)
    status = serializers.ChoiceField(choices=workflow.STATUS_CHOICES, required=False)
    assigned_to = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_assigned_to(self, value):
        if value in (None, ''):
            return None
        assignee = None
        if str(value).isdigit():
            assignee = User.objects.filter(
                pk=int(value),
                role__in=[User.ROLE_MANAGER, User.ROLE_ADMIN],
                is_active=True,
            ).first()
        if assignee is None:
            raise serializers.ValidationError(
                "Assignee must be an active manager or admin.")
        return assignee
