from django.urls import path
from . import views

urlpatterns = [
    path('leave/', views.LeaveListCreateAPIView.as_view(), name='leave'),
    path('leave/<int:pk>/', views.LeaveDetailAPIView.as_view(),
         name='leave-detail'),
]
