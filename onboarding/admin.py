from django.contrib import admin
from .models import OnboardingStep, OnboardingSubmission


class OnboardingStepInline(admin.TabularInline):
    model = OnboardingStep
    extra = 0
    fields = ('step_type', 'status', 'submitted_at', 'reviewed_by', 'reviewed_at')
    readonly_fields = ('submitted_at', 'reviewed_at')


@admin.register(OnboardingSubmission)
class OnboardingSubmissionAdmin(admin.ModelAdmin):
    list_display = ('email', 'department', 'position', 'status',
                    'date_of_joining', 'completed_at')
    list_filter = ('status', 'department', 'employment_type')
    search_fields = ('email', 'user__username')
    inlines = [OnboardingStepInline]


@admin.register(OnboardingStep)
class OnboardingStepAdmin(admin.ModelAdmin):
    list_display = ('submission', 'step_type', 'status', 'submitted_at', 'reviewed_by')
    list_filter = ('status', 'step_type')
