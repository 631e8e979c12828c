from django.urls import path
from . import views

urlpatterns = [
    path('payroll/', views.PayrollListAPIView.as_view(), name='payroll-list'),
    path('payroll/<int:pk>/', views.PayrollDetailAPIView.as_view(), name='payroll-detail'),
    path('payroll/calculate/', views.PayrollCalculateAPIView.as_view(), name='payroll-calculate'),
    path('payroll/process/', views.PayrollProcessAPIView.as_view(), name='payroll-process'),
    path('payroll/cycles/', views.PayrollCycleListCreateAPIView.as_view(), name='payroll-cycles'),
    path('payroll/cycles/<int:pk>/', views.PayrollCycleDetailAPIView.as_view(),
         name='payroll-cycle-detail'),
    path('payroll/inputs/', views.PayrollInputListAPIView.as_view(), name='payroll-inputs'),
    path('payroll/inputs/<int:pk>/', views.PayrollInputDetailAPIView.as_view(),
         name='payroll-input-detail'),
    path('payroll/variable-pay/', views.VariablePayListCreateAPIView.as_view(),
         name='variable-pay'),
    path('payroll/variable-pay/<int:pk>/', views.VariablePayDetailAPIView.as_view(),
         name='variable-pay-detail'),
    path('payroll/payslips/', views.PayslipListCreateAPIView.as_view(), name='payslips'),
    path('payroll/payslips/<int:pk>/download/', views.PayslipDownloadAPIView.as_view(),
         name='payslip-download'),
    path('payroll/corrections/', views.CorrectionListCreateAPIView.as_view(),
         name='payroll-corrections'),
    path('payroll/corrections/<int:pk>/', views.CorrectionDetailAPIView.as_view(),
         name='payroll-correction-detail'),
    path('payroll/dashboard/', views.PayrollDashboardAPIView.as_view(), name='payroll-dashboard'),
    path('payroll/export/', views.PayrollExportAPIView.as_view(), name='payroll-export'),
]
