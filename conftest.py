"""
pytest configuration for DocketFlow.
Sets Django settings; external collaborators are switched off so tests never touch the network.
"""

import tempfile
from datetime import timedelta

from django.conf import settings


def pytest_configure(config):
    """Configure Django settings before tests run."""
    if not settings.configured:
        settings.configure(
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME":   ":memory:",
                }
            },
            INSTALLED_APPS=[
                "django.contrib.admin",
                "django.contrib.contenttypes",
                "django.contrib.auth",
                "django.contrib.sessions",
                "django.contrib.messages",
                "django.contrib.staticfiles",
                "rest_framework",
                "rest_framework_simplejwt",
                "drf_spectacular",
                "django_filters",
                "corsheaders",
                "apps.authentication",
                "apps.audit",
                "apps.dockets",
                "apps.dispatch",
                "apps.payments",
                "apps.pods",
                "apps.tracking",
                "apps.ops",
            ],
            AUTH_USER_MODEL="authentication.User",
            PASSWORD_HASHERS=[
                "django.contrib.auth.hashers.ScryptPasswordHasher",
            ],
            REST_FRAMEWORK={
                "DEFAULT_AUTHENTICATION_CLASSES": [
                    "rest_framework_simplejwt.authentication.JWTAuthentication",
                    "rest_framework.authentication.SessionAuthentication",
                ],
                "DEFAULT_PERMISSION_CLASSES": [
                    "rest_framework.permissions.IsAuthenticated",
                ],
                "DEFAULT_FILTER_BACKENDS": [
                    "django_filters.rest_framework.DjangoFilterBackend",
                ],
                "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
                "PAGE_SIZE": 50,
                "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
                "EXCEPTION_HANDLER": "docketflow.exceptions.api_exception_handler",
            },
            SPECTACULAR_SETTINGS={
                "TITLE": "DocketFlow API",
                "DESCRIPTION": "Docket booking, dispatch and proof-of-delivery operations",
                "VERSION": "1.0.0",
                "SERVE_INCLUDE_SCHEMA": False,
            },
            SECRET_KEY="test-secret-key-not-for-production",
            DEBUG=True,
            USE_TZ=True,
            TIME_ZONE="UTC",
            ROOT_URLCONF="docketflow.urls",
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            TEMPLATES=[{
                "BACKEND": "django.template.backends.django.DjangoTemplates",
                "DIRS": [],
                "APP_DIRS": True,
                "OPTIONS": {
                    "context_processors": [
                        "django.template.context_processors.debug",
                        "django.template.context_processors.request",
                        "django.contrib.auth.context_processors.auth",
                        "django.contrib.messages.context_processors.messages",
                    ],
                },
            }],
            MIDDLEWARE=[
                "django.middleware.security.SecurityMiddleware",
                "corsheaders.middleware.CorsMiddleware",
                "django.contrib.sessions.middleware.SessionMiddleware",
                "django.middleware.common.CommonMiddleware",
                "django.middleware.csrf.CsrfViewMiddleware",
                "django.contrib.auth.middleware.AuthenticationMiddleware",
                "django.contrib.messages.middleware.MessageMiddleware",
            ],
            STATIC_URL="/static/",
            STATIC_ROOT="/tmp/staticfiles_test",
            MEDIA_URL="/media/",
            MEDIA_ROOT=tempfile.mkdtemp(prefix="docketflow-media-"),
            CACHES={
                "default": {
                    "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
                }
            },
            CORS_ALLOW_ALL_ORIGINS=True,
            SIMPLE_JWT={
                "ACCESS_TOKEN_LIFETIME": timedelta(hours=8),
                "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
                "ALGORITHM": "HS256",
                "AUTH_HEADER_TYPES": ("Bearer",),
            },
            # Collaborators (mocked per test where exercised)
            GEOCODER_ENABLED=False,
            GEOCODER_BASE_URL="http://geocoder-mock:8001",
            GEOCODER_USER_AGENT="docketflow-tests",
            GEOCODER_MIN_INTERVAL_SECONDS=0,
            GEOCODER_TIMEOUT_SECONDS=1,
            DEFAULT_GEOFENCE_RADIUS_KM="5",
            POD_ANALYZER_BASE_URL="http://vision-mock:8002/v1",
            POD_ANALYZER_API_KEY="",
            POD_ANALYZER_MODEL="stub-vision",
            POD_ANALYZER_TIMEOUT_SECONDS=1,
            POD_UPLOAD_MAX_BYTES=1024 * 1024,
        )
