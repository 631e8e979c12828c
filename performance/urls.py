from django.urls import path
from . import views

urlpatterns = [
    path('performance/cycles/', views.ReviewCycleListCreateAPIView.as_view(),
         name='review-cycles'),
    path('performance/cycles/<int:pk>/', views.ReviewCycleDetailAPIView.as_view(),
         name='review-cycle-detail'),
    path('performance/goals/', views.GoalListCreateAPIView.as_view(), name='goals'),
    path('performance/goals/<int:pk>/', views.GoalDetailAPIView.as_view(),
         name='goal-detail'),
    path('performance/goals/<int:pk>/updates/', views.GoalUpdateCreateAPIView.as_view(),
         name='goal-updates'),
    path('performance/reviews/', views.ReviewListCreateAPIView.as_view(), name='reviews'),
    path('performance/reviews/<int:pk>/', views.ReviewDetailAPIView.as_view(),
         name='review-detail'),
]
