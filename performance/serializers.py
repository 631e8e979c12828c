from rest_framework import serializers

from employees.models import Employee
from .models import GoalUpdate, PerformanceGoal, PerformanceReview, ReviewCycle


def _check_dates(data, instance=None):
    start = data.get('start_date', getattr(instance, 'start_date', None))
    end = data.get('end_date', getattr(instance, 'end_date', None))
    if start and end and end <= start:
        raise serializers.ValidationError(
            {"end_date": "End date must be after start date."})


class ReviewCycleSerializer(serializers.ModelSerializer):
    review_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = ReviewCycle
        fields = ('id', 'name', 'type', 'start_date', 'end_date', 'status',
                  'created_by', 'review_count', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_by', 'created_at', 'updated_at')

    def validate(self, data):
        _check_dates(data, self.instance)
        return data


class GoalUpdateSerializer(serializers.ModelSerializer):
    updated_by_name = serializers.CharField(
        source='updated_by.display_name', read_only=True, default=None)

    class Meta:
        model = GoalUpdate
        fields = ('id', 'goal', 'update_text', 'progress', 'updated_by',
                  'updated_by_name', 'created_at')
        read_only_fields = ('id', 'goal', 'updated_by', 'created_at')


class PerformanceGoalSerializer(serializers.ModelSerializer):
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.filter(is_active=True), required=False)
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    updates = GoalUpdateSerializer(many=True, read_only=True)

    class Meta:
        model = PerformanceGoal
        fields = (
            'id', 'employee', 'employee_name', 'title', 'description',
            'target', 'category', 'priority', 'status', 'start_date',
            'end_date', 'progress', 'completion_date', 'updates',
            'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'completion_date', 'created_at', 'updated_at')

    def validate(self, data):
        _check_dates(data, self.instance)
        return data


class PerformanceReviewSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(
        source='employee.full_name', read_only=True)
    cycle_name = serializers.CharField(source='cycle.name', read_only=True)
    goal_title = serializers.CharField(
        source='goal.title', read_only=True, default=None)
    reviewed_by_name = serializers.CharField(
        source='reviewed_by.display_name', read_only=True, default=None)

    class Meta:
        model = PerformanceReview
        fields = (
            'id', 'employee', 'employee_name', 'goal', 'goal_title', 'cycle',
            'cycle_name', 'review_type', 'rating', 'comments', 'strengths',
            'improvements', 'status', 'reviewed_by', 'reviewed_by_name',
            'reviewed_at', 'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'reviewed_by', 'reviewed_at',
                            'created_at', 'updated_at')

    def validate(self, data):
        cycle = data.get('cycle')
        if cycle is not None and (self.instance is None or cycle != self.instance.cycle):
            if cycle.status != ReviewCycle.STATUS_ACTIVE:
                raise serializers.ValidationError(
                    {"cycle": "Reviews can only be added to an active cycle."})

        employee = data.get('employee', getattr(self.instance, 'employee', None))
        goal = data.get('goal', getattr(self.instance, 'goal', None))
        if goal is not None and employee is not None and goal.employee_id != employee.id:
            raise serializers.ValidationError(
                {"goal": "Goal does not belong to this employee."})
        return data
