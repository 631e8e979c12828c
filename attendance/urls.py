from django.urls import path
from . import views

urlpatterns = [
    path('attendance/', views.AttendanceListCreateAPIView.as_view(),
         name='attendance'),
    path('attendance/<int:pk>/', views.AttendanceDetailAPIView.as_view(),
         name='attendance-detail'),
    path('attendance/regularization/', views.RegularizationListCreateAPIView.as_view(),
         name='regularization'),
    path('attendance/regularization/<int:pk>/', views.RegularizationDetailAPIView.as_view(),
         name='regularization-detail'),
]
