"""
GatewayAdapter - one logical charge per call against the configured processor.

The adapter never touches order status; it returns a TransactionRecordData or
raises. Processor unavailability is retried a bounded number of times with
exponential backoff. Declines are returned by the processor as data and are
never retried, since every attempt for an order carries the same idempotency
key and a declined charge must not be resubmitted.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from django.utils import timezone
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from infrastructure.payments.interface import (
    ChargeRequest,
    GatewayCredentials,
    PaymentException,
    PaymentProcessorInterface,
    ProcessorAuthenticationError,
    ProcessorResponse,
    ProcessorUnavailableError,
)
from payment_gateway.domain.exceptions import (
    ChargePendingError,
    ConfigurationError,
    PaymentDeclinedError,
    TransientGatewayError,
)
from payment_gateway.domain.models import Order
from payment_gateway.domain.services.order_ledger import TransactionRecordData
from payment_gateway.infra.observability.metrics import gateway_charge_attempts_total
from utils.service_base import BaseService


def idempotency_key_for(order_id) -> str:
    return f"order_{order_id}"


class LookupOutcome(str, Enum):
    CHARGED = "charged"
    DECLINED = "declined"
    PROCESSING = "processing"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class LookupResult:
    outcome: LookupOutcome
    record: Optional[TransactionRecordData] = None
    reason: Optional[str] = None


class GatewayAdapter(BaseService):
    def __init__(
        self,
        processor: PaymentProcessorInterface,
        max_retries: int = 1,
        backoff_seconds: float = 1.0,
        backoff_max_seconds: float = 8.0,
    ):
        super().__init__()
        self.processor = processor
        self.max_retries = max(0, int(max_retries))
        self.backoff_seconds = backoff_seconds
        self.backoff_max_seconds = backoff_max_seconds

    @BaseService.log_performance
    def charge(self, order: Order, credentials: GatewayCredentials) -> TransactionRecordData:
        """
        Charge ``order`` with ``credentials``.

        Raises:
            ConfigurationError: credentials incomplete (before any network call) or rejected
            PaymentDeclinedError: processor declined the charge
            ChargePendingError: processor accepted the charge but has not settled it
            TransientGatewayError: processor unavailable after the bounded retry
        """
        self.require_credentials(credentials)

        request = ChargeRequest(
            order_id=str(order.id),
            amount=order.amount,
            currency=order.currency,
            credentials=credentials,
            idempotency_key=idempotency_key_for(order.id),
            email=order.email,
            payment_method=(order.purchaser_info or {}).get("payment_method"),
        )

        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=self.backoff_max_seconds),
            retry=retry_if_exception_type(TransientGatewayError),
            before_sleep=before_sleep_log(self.logger, logging.WARNING),
            reraise=True,
        )
        response = retrying(self._send, request)

        if response.pending:
            self.logger.info(f"Charge for order {order.id} accepted but still {response.status}")
            raise ChargePendingError(response.transaction_id, response.status)
        if not response.success:
            reason = response.reason or response.status or "declined"
            self.logger.info(f"Processor declined order {order.id}: {reason}")
            raise PaymentDeclinedError(reason)

        return TransactionRecordData(
            transaction_id=response.transaction_id,
            processor_status=response.status or "succeeded",
            recorded_at=timezone.now(),
        )

    def lookup(self, order: Order, credentials: GatewayCredentials) -> LookupResult:
        """
        Ask the processor what happened to earlier charge attempts for ``order``.

        Raises:
            ConfigurationError: credentials incomplete or rejected
            TransientGatewayError: the processor could not be queried
        """
        self.require_credentials(credentials)
        try:
            response = self.processor.lookup(idempotency_key_for(order.id), str(order.id), credentials)
        except ProcessorAuthenticationError as e:
            raise ConfigurationError(str(e)) from e
        except PaymentException as e:
            raise TransientGatewayError(f"Processor lookup failed: {str(e)}") from e

        if response is None:
            return LookupResult(outcome=LookupOutcome.NOT_FOUND)
        if response.pending:
            return LookupResult(outcome=LookupOutcome.PROCESSING)
        if response.success:
            record = TransactionRecordData(
                transaction_id=response.transaction_id,
                processor_status=response.status or "succeeded",
                recorded_at=timezone.now(),
            )
            return LookupResult(outcome=LookupOutcome.CHARGED, record=record)
        return LookupResult(outcome=LookupOutcome.DECLINED, reason=response.reason or response.status or "declined")

    def _send(self, request: ChargeRequest) -> ProcessorResponse:
        try:
            response = self.processor.charge(request)
        except ProcessorAuthenticationError as e:
            gateway_charge_attempts_total.labels(result="rejected_credentials").inc()
            raise ConfigurationError(str(e)) from e
        except ProcessorUnavailableError as e:
            gateway_charge_attempts_total.labels(result="unavailable").inc()
            raise TransientGatewayError(str(e)) from e
        except PaymentException as e:
            # Outcome unknown, so it is retried under the same idempotency key
            gateway_charge_attempts_total.labels(result="error").inc()
            raise TransientGatewayError(str(e)) from e

        if response.pending:
            result = "pending"
        else:
            result = "approved" if response.success else "declined"
        gateway_charge_attempts_total.labels(result=result).inc()
        return response

    @staticmethod
    def require_credentials(credentials: Optional[GatewayCredentials]) -> None:
        if credentials is None or not credentials.is_complete():
            missing = credentials.missing_fields() if credentials is not None else ["api_key", "secret"]
            raise ConfigurationError(f"Gateway credentials incomplete: missing {', '.join(missing)}", field=missing[0])
