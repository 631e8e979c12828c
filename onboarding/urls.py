from django.urls import path
from . import views

urlpatterns = [
    path('onboarding/', views.OnboardingCreateAPIView.as_view(), name='onboarding-create'),
    path('onboarding/login/', views.OnboardingLoginView.as_view(), name='onboarding-login'),
    path('onboarding/my-status/', views.MyOnboardingStatusAPIView.as_view(),
         name='onboarding-my-status'),
    path('onboarding/submissions/', views.SubmissionListAPIView.as_view(),
         name='onboarding-submissions'),
    path('onboarding/submissions/<int:pk>/', views.SubmissionDetailAPIView.as_view(),
         name='onboarding-submission-detail'),
    path('onboarding/submissions/<int:pk>/cancel/', views.SubmissionCancelAPIView.as_view(),
         name='onboarding-submission-cancel'),
    path('onboarding/steps/<int:pk>/', views.StepDetailAPIView.as_view(),
         name='onboarding-step'),
    path('onboarding/steps/<int:pk>/review/', views.StepReviewAPIView.as_view(),
         name='onboarding-step-review'),
    path('onboarding/backfill/', views.OnboardingBackfillAPIView.as_view(),
         name='onboarding-backfill'),
]
