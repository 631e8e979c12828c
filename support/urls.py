from django.urls import path
from . import views

urlpatterns = [
    path('employee-requests/', views.EmployeeRequestListCreateAPIView.as_view(),
         name='employee-requests'),
    path('employee-requests/stats/', views.EmployeeRequestStatsAPIView.as_view(),
         name='employee-request-stats'),
    path('employee-requests/<int:pk>/', views.EmployeeRequestDetailAPIView.as_view(),
         name='employee-request-detail'),
    path('employee-requests/<int:pk>/comments/',
         views.RequestCommentListCreateAPIView.as_view(),
         name='employee-request-comments'),
    path('requests/', views.RequestQueueAPIView.as_view(), name='request-queue'),
]
