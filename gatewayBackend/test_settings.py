import os

# Mock SECRET_KEY for tests BEFORE importing settings to bypass validation
os.environ.setdefault("SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: F403

# Override Database to use SQLite for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
    }
}

# Disable external services
INFRASTRUCTURE["PAYMENT_PROCESSOR"] = "mock"  # noqa: F405
INFRASTRUCTURE["GATEWAY_SETTINGS_BACKEND"] = "django"  # noqa: F405

PAYMENT_GATEWAY["CREDENTIALS"] = {  # noqa: F405
    "api_key": "pk_test_mock_key",
    "secret": "sk_test_mock_key",
    "test_mode": True,
}
PAYMENT_GATEWAY["RETRY_BACKOFF_SECONDS"] = 0  # noqa: F405
PAYMENT_GATEWAY["RETRY_BACKOFF_MAX_SECONDS"] = 0  # noqa: F405

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
