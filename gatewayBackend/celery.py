"""
Celery Configuration for gatewayBackend

Runs the periodic reconciliation of orders left pending after a processor timeout.
"""

import os

from celery import Celery


# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gatewayBackend.settings")

app = Celery("gatewayBackend")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    # Resolve orders stuck in 'pending' after a gateway timeout
    "reconcile-pending-orders": {
        "task": "reconcile_pending_orders",
        "schedule": 60.0 * 5.0,  # Every 5 minutes
        "options": {"expires": 4.0 * 60.0, "queue": "payment_tasks"},
    },
    "purge-consumed-replay-tokens": {
        "task": "purge_consumed_replay_tokens",
        "schedule": 60.0 * 60.0,  # Every hour
        "options": {"expires": 15.0 * 60.0, "queue": "payment_tasks"},
    },
}

app.conf.update(
    task_routes={
        "reconcile_pending_orders": {"queue": "payment_tasks"},
        "purge_consumed_replay_tokens": {"queue": "payment_tasks"},
    },
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=60 * 60 * 24,  # Results expire after 24 hours
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=10 * 60,
    task_soft_time_limit=8 * 60,
)
