"""
Tests for OrderLedger state transitions
"""

import threading
import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.db import connection
from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature
from django.utils import timezone

from payment_gateway.domain.exceptions import InvalidTransitionError, NotFoundError
from payment_gateway.domain.services.order_ledger import OrderDraft, OrderLedger, TransactionRecordData
from payment_gateway.models import Order, TransactionRecord
from payment_gateway.tests.factories import OrderFactory


def make_record(transaction_id="TRANS_123"):
    return TransactionRecordData(transaction_id=transaction_id, processor_status="succeeded", recorded_at=timezone.now())


class OrderLedgerTest(TestCase):
    def setUp(self):
        self.ledger = OrderLedger()

    def test_create_pending(self):
        order = self.ledger.create_pending(
            OrderDraft(amount=Decimal("12.50"), currency="EUR", email="a@example.com", cart=[{"id": 7}])
        )

        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(Order.objects.get(pk=order.pk).cart, [{"id": 7}])

    def test_mark_complete_attaches_transaction_record(self):
        order = OrderFactory()

        updated = self.ledger.mark_complete(order.id, make_record())

        self.assertEqual(updated.status, Order.STATUS_COMPLETE)
        self.assertEqual(updated.transaction_record.transaction_id, "TRANS_123")
        self.assertEqual(updated.transaction_record.processor_status, "succeeded")

    def test_mark_failed_records_reason(self):
        order = OrderFactory()

        updated = self.ledger.mark_failed(order.id, "insufficient_funds")

        self.assertEqual(updated.status, Order.STATUS_FAILED)
        self.assertEqual(updated.failure_reason, "insufficient_funds")
        self.assertFalse(TransactionRecord.objects.filter(order=order).exists())

    def test_unknown_order(self):
        for order_id in (uuid.uuid4(), "not-a-uuid"):
            with self.subTest(order_id=order_id):
                with self.assertRaises(NotFoundError):
                    self.ledger.mark_complete(order_id, make_record())
                with self.assertRaises(NotFoundError):
                    self.ledger.mark_failed(order_id, "x")
                with self.assertRaises(NotFoundError):
                    self.ledger.get(order_id)

    def test_terminal_orders_reject_further_transitions(self):
        complete = OrderFactory()
        self.ledger.mark_complete(complete.id, make_record())
        failed = OrderFactory()
        self.ledger.mark_failed(failed.id, "card_declined")

        with self.assertRaises(InvalidTransitionError):
            self.ledger.mark_failed(complete.id, "late decline")
        with self.assertRaises(InvalidTransitionError):
            self.ledger.mark_complete(complete.id, make_record("TRANS_999"))
        with self.assertRaises(InvalidTransitionError):
            self.ledger.mark_complete(failed.id, make_record())

        self.assertEqual(Order.objects.get(pk=complete.pk).status, Order.STATUS_COMPLETE)
        self.assertEqual(Order.objects.get(pk=failed.pk).failure_reason, "card_declined")
        self.assertEqual(TransactionRecord.objects.count(), 1)

    def test_stale_read_is_caught_by_conditional_update(self):
        order = OrderFactory()
        stale = Order.objects.get(pk=order.pk)
        self.ledger.mark_failed(order.id, "card_declined")

        with patch.object(OrderLedger, "_lock_pending", return_value=stale):
            with self.assertRaises(InvalidTransitionError) as ctx:
                self.ledger.mark_complete(order.id, make_record())

        self.assertEqual(ctx.exception.current_status, Order.STATUS_FAILED)
        self.assertFalse(TransactionRecord.objects.exists())

    def test_racing_finishers_exactly_one_wins(self):
        finishers = {
            "complete": lambda ledger, order_id: ledger.mark_complete(order_id, make_record()),
            "fail": lambda ledger, order_id: ledger.mark_failed(order_id, "insufficient_funds"),
        }
        for first, second in (("complete", "fail"), ("fail", "complete")):
            with self.subTest(first=first):
                order = OrderFactory()
                # Both writers got past the pending check before either wrote
                snapshot = Order.objects.get(pk=order.pk)
                winner, loser = OrderLedger(), OrderLedger()

                with patch.object(OrderLedger, "_lock_pending", return_value=snapshot):
                    finishers[first](winner, order.id)
                    with self.assertRaises(InvalidTransitionError):
                        finishers[second](loser, order.id)

                final = Order.objects.get(pk=order.pk)
                self.assertEqual(final.status, Order.STATUS_COMPLETE if first == "complete" else Order.STATUS_FAILED)
                self.assertEqual(
                    TransactionRecord.objects.filter(order=final).count(), int(final.status == Order.STATUS_COMPLETE)
                )

    def test_transaction_record_is_immutable(self):
        order = OrderFactory()
        record = self.ledger.mark_complete(order.id, make_record()).transaction_record

        record.transaction_id = "TAMPERED"
        with self.assertRaises(ValueError):
            record.save()

    def test_list_pending_filters_by_age(self):
        old = OrderFactory()
        Order.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(hours=2))
        OrderFactory()
        done = OrderFactory()
        self.ledger.mark_failed(done.id, "x")

        self.assertEqual(len(self.ledger.list_pending()), 2)
        self.assertEqual(
            [o.id for o in self.ledger.list_pending(older_than=timezone.now() - timedelta(hours=1))], [old.id]
        )


class OrderLedgerConcurrencyTest(TransactionTestCase):
    """
    Races on real row locks. SQLite has no SELECT ... FOR UPDATE; run with
    ``--ds=gatewayBackend.test_settings_postgres`` to exercise this.
    """

    @skipUnlessDBFeature("has_select_for_update")
    def test_concurrent_complete_and_fail_exactly_one_wins(self):
        order = OrderFactory()
        ledger = OrderLedger()
        barrier = threading.Barrier(2)
        results = []

        def run(operation):
            try:
                barrier.wait()
                operation()
                results.append("won")
            except InvalidTransitionError:
                results.append("conflict")
            finally:
                connection.close()

        threads = [
            threading.Thread(target=run, args=(lambda: ledger.mark_complete(order.id, make_record()),)),
            threading.Thread(target=run, args=(lambda: ledger.mark_failed(order.id, "insufficient_funds"),)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(results), ["conflict", "won"])
        final = Order.objects.get(pk=order.pk)
        self.assertIn(final.status, Order.TERMINAL_STATUSES)
        self.assertEqual(TransactionRecord.objects.filter(order=final).count(), int(final.status == Order.STATUS_COMPLETE))
