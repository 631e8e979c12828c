from django.contrib import admin
from .models import GoalUpdate, PerformanceGoal, PerformanceReview, ReviewCycle


@admin.register(ReviewCycle)
class ReviewCycleAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'start_date', 'end_date', 'status')
    list_filter = ('status', 'type')
    search_fields = ('name',)


class GoalUpdateInline(admin.TabularInline):
    model = GoalUpdate
    extra = 0


@admin.register(PerformanceGoal)
class PerformanceGoalAdmin(admin.ModelAdmin):
    list_display = ('title', 'employee', 'category', 'priority', 'status', 'progress')
    list_filter = ('status', 'category', 'priority')
    search_fields = ('title', 'employee__employee_id', 'employee__first_name')
    inlines = [GoalUpdateInline]


@admin.register(PerformanceReview)
class PerformanceReviewAdmin(admin.ModelAdmin):
    list_display = ('employee', 'cycle', 'review_type', 'rating', 'status', 'reviewed_by')
    list_filter = ('status', 'rating', 'review_type')
    search_fields = ('employee__employee_id', 'employee__first_name')
