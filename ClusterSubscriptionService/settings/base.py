"""
Base Django settings for ClusterSubscriptionService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-3q8v!k2c@x#t0m^7r9z$w1y&u5n(e4b)h6j+s_a-d%l=p8g"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "ClusterSubscriptionService.apps.ClusterSubscriptionServiceConfig",
    "core",
    "subscriptions.apps.SubscriptionsConfig",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.subscription.SubscriptionGateMiddleware",
]

ROOT_URLCONF = "ClusterSubscriptionService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "ClusterSubscriptionService.wsgi.application"
ASGI_APPLICATION = "ClusterSubscriptionService.asgi.application"

# The subscription state lives in process memory; no database is used
DATABASES = {}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Cluster Subscription Service API",
    "DESCRIPTION": (
        "Activates this cluster's subscription against the remote licensing "
        "service and reports the installed subscription."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Subscription API", "description": "Subscription activation and status"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Licensing service
SUBSCRIPTION_API_BASE_URL = os.environ.get("SUBSCRIPTION_API_BASE_URL", "")
SUBSCRIPTION_API_TIMEOUT = float(os.environ.get("SUBSCRIPTION_API_TIMEOUT", "30"))

# Hex-encoded DER (or PEM) P-256 public key trusted for license signatures
ECC_PUBLIC_KEY = os.environ.get("ECC_PUBLIC_KEY", "")

# Namespace whose UID identifies the cluster
CLUSTER_IDENTITY_NAMESPACE = os.environ.get("CLUSTER_IDENTITY_NAMESPACE", "kube-system")

# "trial_end_at" or "end_date"
SUBSCRIPTION_TRIAL_END_SOURCE = os.environ.get("SUBSCRIPTION_TRIAL_END_SOURCE", "trial_end_at")

# Subscription gate
SUBSCRIPTION_RECHECK_INTERVAL = int(os.environ.get("SUBSCRIPTION_RECHECK_INTERVAL", "86400"))
SUBSCRIPTION_PROTECTED_PATHS = ["/api/"]
SUBSCRIPTION_EXEMPT_PATHS = [
    "/api/v1/subscriptions/",
    "/api/schema/",
    "/api/docs/",
    "/api/redoc/",
]

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
OTEL_ENABLED = os.environ.get("OTEL_ENABLED", "true").lower() == "true"
