"""
Test settings against PostgreSQL, for the row-lock concurrency tests.

    pytest --ds=gatewayBackend.test_settings_postgres
"""

import os

from .test_settings import *  # noqa: F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("TEST_DB_NAME", "gateway_test"),
        "USER": os.environ.get("DB_USER", "gateway"),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
    }
}
