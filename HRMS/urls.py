from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/', include('accounts.urls')),
    path('api/', include('employees.urls')),
    path('api/', include('attendance.urls')),
    path('api/', include('leave.urls')),
    path('api/', include('payroll.urls')),
    path('api/', include('onboarding.urls')),
    path('api/', include('performance.urls')),
    path('api/', include('support.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
