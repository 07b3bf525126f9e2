"""
Celery Tasks for the Payment Gateway
"""

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings

from infrastructure.container import ServiceContainer


logger = logging.getLogger(__name__)


@shared_task(name="reconcile_pending_orders")
def reconcile_pending_orders(minutes=None):
    """
    Resolve orders left pending after a gateway timeout.

    Orders younger than ``minutes`` (default PAYMENT_GATEWAY['RECONCILE_AFTER_MINUTES'])
    are left alone so in-flight checkouts are not raced.
    """
    if minutes is None:
        minutes = settings.PAYMENT_GATEWAY.get("RECONCILE_AFTER_MINUTES", 15)

    logger.info(f"Starting reconciliation of orders pending for more than {minutes} minutes...")
    try:
        report = ServiceContainer().order_processor().reconcile_pending(older_than=timedelta(minutes=minutes))
    except Exception as e:
        logger.error(f"Error in reconcile_pending_orders task: {e}", exc_info=True)
        raise

    return {
        "examined": report.examined,
        "completed": report.completed,
        "failed": report.failed,
        "still_pending": report.still_pending,
    }


@shared_task(name="purge_consumed_replay_tokens")
def purge_consumed_replay_tokens():
    """Delete spent-token digests whose tokens have expired anyway."""
    deleted = ServiceContainer().token_service().purge_expired()
    logger.info(f"Purged {deleted} consumed anti-replay tokens")
    return deleted
