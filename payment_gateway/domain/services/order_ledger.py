"""
OrderLedger - sole writer of order status.

Every transition runs in its own database transaction: the order row is
locked with ``select_for_update`` and the status is changed with a conditional
``UPDATE ... WHERE status = 'pending'``. Two callers racing on one order are
serialized; exactly one transition succeeds and the other receives
``InvalidTransitionError``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from payment_gateway.domain.exceptions import InvalidTransitionError, NotFoundError
from payment_gateway.domain.models import Order, TransactionRecord
from utils.service_base import BaseService


@dataclass
class OrderDraft:
    """Validated submission data for a new pending order."""

    amount: Decimal
    currency: str
    email: str
    purchaser_info: dict = field(default_factory=dict)
    cart: list = field(default_factory=list)
    gateway: str = "custom_gateway"


@dataclass(frozen=True)
class TransactionRecordData:
    """Processor transaction details to attach on completion."""

    transaction_id: str
    processor_status: str
    recorded_at: datetime


class OrderLedger(BaseService):
    @BaseService.log_performance
    def create_pending(self, draft: OrderDraft) -> Order:
        order = Order.objects.create(
            amount=draft.amount,
            currency=draft.currency,
            email=draft.email,
            purchaser_info=draft.purchaser_info,
            cart=draft.cart,
            gateway=draft.gateway,
            status=Order.STATUS_PENDING,
        )
        self.logger.info(f"Created pending order {order.id} for {order.amount} {order.currency}")
        return order

    def get(self, order_id) -> Order:
        try:
            return Order.objects.select_related("transaction_record").get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Order {order_id} does not exist")

    def list_pending(self, older_than: Optional[datetime] = None) -> List[Order]:
        queryset = Order.objects.filter(status=Order.STATUS_PENDING)
        if older_than is not None:
            queryset = queryset.filter(created_at__lt=older_than)
        return list(queryset.order_by("created_at"))

    @BaseService.log_performance
    def mark_complete(self, order_id, record: TransactionRecordData) -> Order:
        with transaction.atomic():
            order = self._lock_pending(order_id, Order.STATUS_COMPLETE)
            self._conditional_update(order, Order.STATUS_COMPLETE, failure_reason="")
            TransactionRecord.objects.create(
                order=order,
                transaction_id=record.transaction_id,
                processor_status=record.processor_status,
                created_at=record.recorded_at,
            )
        self.logger.info(f"Order {order.id} complete (transaction {record.transaction_id})")
        return self.get(order.id)

    @BaseService.log_performance
    def mark_failed(self, order_id, reason: str) -> Order:
        with transaction.atomic():
            order = self._lock_pending(order_id, Order.STATUS_FAILED)
            self._conditional_update(order, Order.STATUS_FAILED, failure_reason=reason or "")
        self.logger.info(f"Order {order.id} failed: {reason}")
        return self.get(order.id)

    def _lock_pending(self, order_id, target_status: str) -> Order:
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Order {order_id} does not exist")
        if order.status != Order.STATUS_PENDING:
            raise InvalidTransitionError(order.id, order.status, target_status)
        return order

    def _conditional_update(self, order: Order, target_status: str, **fields) -> None:
        updated = Order.objects.filter(pk=order.pk, status=Order.STATUS_PENDING).update(
            status=target_status, updated_at=timezone.now(), **fields
        )
        if updated != 1:
            current = Order.objects.filter(pk=order.pk).values_list("status", flat=True).first()
            raise InvalidTransitionError(order.id, current, target_status)
