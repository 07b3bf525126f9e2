"""
OrderProcessor - the capability exposed to the host checkout.

    intake(submission)  -> pending Order
    process(order_id)   -> CheckoutOutcome
    checkout(submission) = intake + process

All collaborators are passed in explicitly; see
``infrastructure.container.build_order_processor`` for the production wiring.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from django.utils import timezone

from payment_gateway.domain.exceptions import (
    ChargePendingError,
    ConfigurationError,
    InvalidTransitionError,
    PaymentDeclinedError,
    TransientGatewayError,
)
from payment_gateway.domain.models import Order
from payment_gateway.domain.services.gateway_adapter import GatewayAdapter, LookupOutcome
from payment_gateway.domain.services.intake_service import OrderIntakeService
from payment_gateway.domain.services.order_ledger import OrderLedger
from payment_gateway.domain.services.settings_store import SettingsStore
from payment_gateway.infra.observability.metrics import checkout_orders_total, reconciliation_outcomes_total
from utils.service_base import BaseService


NO_CHARGE_AFTER_TIMEOUT = "no_charge_after_timeout"


@dataclass(frozen=True)
class RedirectTargets:
    success_url: str = "/checkout/success/"
    checkout_url: str = "/checkout/"
    pending_url: str = "/checkout/pending/"


@dataclass(frozen=True)
class CheckoutOutcome:
    order_id: str
    status: str
    purchase_key: str
    redirect_url: str
    transaction_id: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.status == Order.STATUS_COMPLETE


@dataclass
class ReconciliationReport:
    examined: int = 0
    completed: int = 0
    failed: int = 0
    still_pending: int = 0
    order_ids: list = field(default_factory=list)


class OrderProcessor(BaseService):
    def __init__(
        self,
        intake_service: OrderIntakeService,
        adapter: GatewayAdapter,
        ledger: OrderLedger,
        settings_store: SettingsStore,
        redirects: Optional[RedirectTargets] = None,
    ):
        super().__init__()
        self.intake_service = intake_service
        self.adapter = adapter
        self.ledger = ledger
        self.settings_store = settings_store
        self.redirects = redirects or RedirectTargets()

    def intake(self, submission: Mapping[str, Any]) -> Order:
        return self.intake_service.submit(submission)

    @BaseService.log_performance
    def process(self, order_id) -> CheckoutOutcome:
        """
        Charge a pending order and record its terminal outcome.

        Already-terminal orders are returned as they are, without contacting the
        processor. ConfigurationError propagates and leaves the order pending.
        When the charge outcome is unknown the processor is asked once. A lookup
        that finds nothing leaves the order pending; only ``reconcile_pending``,
        which sees orders older than its threshold, fails such orders.
        """
        order = self.ledger.get(order_id)
        if order.is_terminal:
            self.logger.info(f"Order {order.id} already {order.status}; not charging again")
            return self.outcome_for(order)

        credentials = self.settings_store.get_credentials()
        try:
            record = self.adapter.charge(order, credentials)
        except ConfigurationError:
            self.logger.error(f"Order {order.id} left pending: gateway is not configured")
            raise
        except PaymentDeclinedError as e:
            return self._finish_failed(order, e.reason)
        except ChargePendingError as e:
            return self._leave_pending(order, "processing", str(e))
        except TransientGatewayError as e:
            self.logger.warning(f"Charge for order {order.id} did not complete ({e}); reconciling")
            return self._reconcile(order, credentials, confirm_absence=False)

        try:
            order = self.ledger.mark_complete(order.id, record)
        except InvalidTransitionError:
            return self._concurrent_outcome(order)
        checkout_orders_total.labels(status=Order.STATUS_COMPLETE).inc()
        return self.outcome_for(order)

    def checkout(self, submission: Mapping[str, Any]) -> CheckoutOutcome:
        order = self.intake(submission)
        return self.process(order.id)

    @BaseService.log_performance
    def reconcile_pending(self, older_than: timedelta) -> ReconciliationReport:
        """
        Resolve orders left pending for longer than ``older_than`` using processor lookups.

        Raises ConfigurationError when credentials are incomplete; orders whose
        lookup fails stay pending and are counted in ``still_pending``.
        """
        report = ReconciliationReport()
        pending = self.ledger.list_pending(older_than=timezone.now() - older_than)
        if not pending:
            return report

        credentials = self.settings_store.get_credentials()
        self.adapter.require_credentials(credentials)
        for order in pending:
            outcome = self._reconcile(order, credentials, confirm_absence=True)
            report.examined += 1
            report.order_ids.append(outcome.order_id)
            if outcome.status == Order.STATUS_COMPLETE:
                report.completed += 1
            elif outcome.status == Order.STATUS_FAILED:
                report.failed += 1
            else:
                report.still_pending += 1

        self.logger.info(
            f"Reconciliation examined {report.examined}: {report.completed} complete, "
            f"{report.failed} failed, {report.still_pending} still pending"
        )
        return report

    def outcome_for(self, order: Order) -> CheckoutOutcome:
        record = getattr(order, "transaction_record", None) if order.status == Order.STATUS_COMPLETE else None
        return CheckoutOutcome(
            order_id=str(order.id),
            status=order.status,
            purchase_key=order.purchase_key,
            redirect_url=self._redirect_for(order),
            transaction_id=record.transaction_id if record else None,
            reason=order.failure_reason or None,
        )

    def _reconcile(self, order: Order, credentials, confirm_absence: bool) -> CheckoutOutcome:
        """
        Resolve ``order`` from a processor lookup.

        With ``confirm_absence`` False a NOT_FOUND result leaves the order
        pending instead of failing it.
        """
        try:
            result = self.adapter.lookup(order, credentials)
        except (TransientGatewayError, ConfigurationError) as e:
            return self._leave_pending(order, "unresolved", str(e))

        if result.outcome == LookupOutcome.PROCESSING:
            return self._leave_pending(order, LookupOutcome.PROCESSING.value, "charge has not settled")
        if result.outcome == LookupOutcome.NOT_FOUND and not confirm_absence:
            return self._leave_pending(order, "not_yet_visible", "no charge visible yet")

        reconciliation_outcomes_total.labels(outcome=result.outcome.value).inc()
        if result.outcome == LookupOutcome.CHARGED:
            try:
                order = self.ledger.mark_complete(order.id, result.record)
            except InvalidTransitionError:
                return self._concurrent_outcome(order)
            checkout_orders_total.labels(status=Order.STATUS_COMPLETE).inc()
            return self.outcome_for(order)
        if result.outcome == LookupOutcome.DECLINED:
            return self._finish_failed(order, result.reason)
        return self._finish_failed(order, NO_CHARGE_AFTER_TIMEOUT)

    def _leave_pending(self, order: Order, outcome: str, detail: str) -> CheckoutOutcome:
        self.logger.warning(f"Order {order.id} left pending for reconciliation: {detail}")
        reconciliation_outcomes_total.labels(outcome=outcome).inc()
        checkout_orders_total.labels(status=Order.STATUS_PENDING).inc()
        return self.outcome_for(self.ledger.get(order.id))

    def _finish_failed(self, order: Order, reason: str) -> CheckoutOutcome:
        try:
            order = self.ledger.mark_failed(order.id, reason)
        except InvalidTransitionError:
            return self._concurrent_outcome(order)
        checkout_orders_total.labels(status=Order.STATUS_FAILED).inc()
        return self.outcome_for(order)

    def _concurrent_outcome(self, order: Order) -> CheckoutOutcome:
        current = self.ledger.get(order.id)
        self.logger.warning(f"Order {order.id} was finished concurrently as {current.status}")
        return self.outcome_for(current)

    def _redirect_for(self, order: Order) -> str:
        if order.status == Order.STATUS_COMPLETE:
            return f"{self.redirects.success_url}?{urlencode({'purchase_key': order.purchase_key})}"
        if order.status == Order.STATUS_FAILED:
            return self.redirects.checkout_url
        return self.redirects.pending_url
