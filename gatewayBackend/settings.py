"""
Django settings for gatewayBackend project.

All deployment-specific values are read from the environment (a local ``.env``
file is loaded when present).
"""

import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("SECRET_KEY")
if not SECRET_KEY:
    raise ImproperlyConfigured("SECRET_KEY environment variable is required")

DEBUG = env_bool("DEBUG", False)

ALLOWED_HOSTS = [host for host in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if host]


INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "payment_gateway",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "gatewayBackend.urls"

TEMPLATES = [
    {
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
    },
]

WSGI_APPLICATION = "gatewayBackend.wsgi.application"


DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.postgresql"),
        "NAME": os.environ.get("DB_NAME", "gateway"),
        "USER": os.environ.get("DB_USER", "gateway"),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "ATOMIC_REQUESTS": False,
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


REST_FRAMEWORK = {
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Payment Gateway API",
    "DESCRIPTION": "Checkout intake, gateway processing and order reporting",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}


# Infrastructure backends
INFRASTRUCTURE = {
    # 'stripe' or 'mock'
    "PAYMENT_PROCESSOR": os.environ.get("PAYMENT_PROCESSOR", "stripe"),
    # 'database' (admin-managed GatewaySettings row) or 'django' (PAYMENT_GATEWAY['CREDENTIALS'])
    "GATEWAY_SETTINGS_BACKEND": os.environ.get("GATEWAY_SETTINGS_BACKEND", "database"),
}

PAYMENT_GATEWAY = {
    "GATEWAY_ID": "custom_gateway",
    "ADMIN_LABEL": "Custom Gateway",
    "CHECKOUT_LABEL": "Pay with Custom Gateway",
    "CREDENTIALS": {
        "api_key": os.environ.get("GATEWAY_API_KEY", ""),
        "secret": os.environ.get("GATEWAY_SECRET", ""),
        "test_mode": env_bool("GATEWAY_TEST_MODE", False),
    },
    "MAX_RETRIES": int(os.environ.get("GATEWAY_MAX_RETRIES", "1")),
    "RETRY_BACKOFF_SECONDS": float(os.environ.get("GATEWAY_RETRY_BACKOFF_SECONDS", "1.0")),
    "RETRY_BACKOFF_MAX_SECONDS": float(os.environ.get("GATEWAY_RETRY_BACKOFF_MAX_SECONDS", "8.0")),
    "TOKEN_MAX_AGE_SECONDS": int(os.environ.get("CHECKOUT_TOKEN_MAX_AGE_SECONDS", "3600")),
    "RECONCILE_AFTER_MINUTES": int(os.environ.get("RECONCILE_AFTER_MINUTES", "15")),
    "SUCCESS_URL": os.environ.get("CHECKOUT_SUCCESS_URL", "/checkout/success/"),
    "CHECKOUT_URL": os.environ.get("CHECKOUT_URL", "/checkout/"),
    "PENDING_URL": os.environ.get("CHECKOUT_PENDING_URL", "/checkout/pending/"),
}


# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "payment_gateway": {
            "handlers": ["console"],
            "level": os.environ.get("PAYMENT_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "infrastructure": {
            "handlers": ["console"],
            "level": os.environ.get("PAYMENT_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
