"""DocketFlow root URL configuration."""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI / Interactive Docs
    path("api/schema/",  SpectacularAPIView.as_view(),       name="schema"),
    path("api/docs/",    SpectacularSwaggerView.as_view(), name="swagger-ui"),

    # Auth
    path("api/auth/",    include("apps.authentication.urls")),

    # Docket lifecycle
    path("api/",         include("apps.dockets.urls")),
    path("api/",         include("apps.tracking.urls")),
    path("api/",         include("apps.dispatch.urls")),
    path("api/",         include("apps.payments.urls")),
    path("api/",         include("apps.pods.urls")),

    # Audit trail
    path("api/audit-logs/", include("apps.audit.urls")),

    # Ops
    path("api/dashboard/", include("apps.ops.urls")),
    path("api/health/",    include("apps.ops.health_urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# Prometheus metrics (only when the app is enabled)
if "django_prometheus" in settings.INSTALLED_APPS:
    urlpatterns += [path("", include("django_prometheus.urls"))]
