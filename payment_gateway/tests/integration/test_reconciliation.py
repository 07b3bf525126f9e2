"""
Integration tests for the reconciliation command and Celery tasks
"""

from datetime import timedelta
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.utils import timezone

from infrastructure.payments import MockProcessor, ProcessorResponse
from payment_gateway.domain.services.gateway_adapter import idempotency_key_for
from payment_gateway.models import ConsumedReplayToken, Order
from payment_gateway.tasks import purge_consumed_replay_tokens, reconcile_pending_orders
from payment_gateway.tests.factories import OrderFactory


def stale_order(minutes=30):
    order = OrderFactory()
    Order.objects.filter(pk=order.pk).update(created_at=timezone.now() - timedelta(minutes=minutes))
    return order


class ReconcileOrdersCommandTest(TestCase):
    def setUp(self):
        self.processor = MockProcessor()
        patcher = patch("infrastructure.payments.factory.PaymentProcessorFactory.create", return_value=self.processor)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_resolves_stale_orders(self):
        charged = stale_order()
        missing = stale_order()
        self.processor.record_charge(
            idempotency_key_for(charged.id), ProcessorResponse(success=True, transaction_id="TRANS_1", status="succeeded")
        )
        out = StringIO()

        call_command("reconcile_orders", stdout=out)

        self.assertEqual(Order.objects.get(pk=charged.pk).status, Order.STATUS_COMPLETE)
        self.assertEqual(Order.objects.get(pk=missing.pk).status, Order.STATUS_FAILED)
        self.assertIn("1 complete, 1 failed, 0 still pending", out.getvalue())

    def test_minutes_option_limits_the_sweep(self):
        order = stale_order(minutes=10)

        call_command("reconcile_orders", minutes=60, stdout=StringIO())

        self.assertEqual(Order.objects.get(pk=order.pk).status, Order.STATUS_PENDING)

    def test_unresolved_orders_are_reported(self):
        stale_order()
        self.processor.fail_lookups()
        out = StringIO()

        call_command("reconcile_orders", stdout=out)

        self.assertIn("remain pending", out.getvalue())

    def test_negative_minutes(self):
        with self.assertRaises(CommandError):
            call_command("reconcile_orders", minutes=-1, stdout=StringIO())

    @override_settings(PAYMENT_GATEWAY={"CREDENTIALS": {"api_key": "", "secret": ""}})
    def test_unconfigured_gateway(self):
        stale_order()

        with self.assertRaises(CommandError):
            call_command("reconcile_orders", minutes=15, stdout=StringIO())


class ReconciliationTaskTest(TestCase):
    @patch("infrastructure.payments.factory.PaymentProcessorFactory.create")
    def test_reconcile_task_returns_report(self, mock_create):
        mock_create.return_value = MockProcessor()
        stale_order()

        result = reconcile_pending_orders(15)

        self.assertEqual(result, {"examined": 1, "completed": 0, "failed": 1, "still_pending": 0})

    def test_purge_task_removes_expired_digests(self):
        ConsumedReplayToken.objects.create(digest="a" * 64)
        ConsumedReplayToken.objects.filter(digest="a" * 64).update(consumed_at=timezone.now() - timedelta(days=2))
        ConsumedReplayToken.objects.create(digest="b" * 64)

        deleted = purge_consumed_replay_tokens()

        self.assertEqual(deleted, 1)
        self.assertEqual(list(ConsumedReplayToken.objects.values_list("digest", flat=True)), ["b" * 64])
