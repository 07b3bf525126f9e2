"""
Mock Payment Processor
======================

In-memory implementation of PaymentProcessorInterface for tests and development.
Approves every charge unless outcomes have been scripted.
"""

import logging
import threading
import uuid
from typing import Dict, List, Optional, Union

from .interface import (
    ChargeRequest,
    GatewayCredentials,
    PaymentProcessorInterface,
    ProcessorResponse,
    ProcessorUnavailableError,
)

logger = logging.getLogger(__name__)

ScriptedOutcome = Union[ProcessorResponse, Exception, "LostResponse"]


class LostResponse:
    """Scripted outcome: the charge is stored, then ``error`` is raised to the caller."""

    def __init__(self, response: ProcessorResponse, error: Exception):
        self.response = response
        self.error = error


class MockProcessor(PaymentProcessorInterface):
    """
    Mock processor for testing and development.

    - Charges are keyed by idempotency key: a repeated key returns the stored
      response without creating a second charge.
    - ``requests`` records every call that reached the processor, ``charges``
      holds one entry per distinct charge.
    - ``script()`` queues outcomes (responses or exceptions) consumed in order
      by subsequent charge calls; an exception outcome leaves no charge behind.
    - ``script_lost_response()`` queues a charge that succeeds remotely but
      whose response never reaches the caller (a timeout after the effect).
    """

    def __init__(self, transaction_prefix: str = "mock_txn"):
        self.transaction_prefix = transaction_prefix
        self.requests: List[ChargeRequest] = []
        self.charges: Dict[str, ProcessorResponse] = {}
        self.lookup_calls: List[str] = []
        self._scripted: List[ScriptedOutcome] = []
        self._lookup_error: Optional[Exception] = None
        self._lock = threading.Lock()

    def script(self, *outcomes: ScriptedOutcome) -> "MockProcessor":
        with self._lock:
            self._scripted.extend(outcomes)
        return self

    def script_lost_response(self, transaction_id: str, error: Optional[Exception] = None) -> "MockProcessor":
        response = ProcessorResponse(success=True, transaction_id=transaction_id, status="succeeded")
        return self.script(LostResponse(response, error or ProcessorUnavailableError("mock timeout")))

    def fail_lookups(self, error: Optional[Exception] = None) -> "MockProcessor":
        self._lookup_error = error or ProcessorUnavailableError("mock lookup unavailable")
        return self

    def record_charge(self, idempotency_key: str, response: ProcessorResponse) -> None:
        """Store a charge directly, as if a previous request had succeeded remotely."""
        with self._lock:
            self.charges[idempotency_key] = response

    def charge(self, request: ChargeRequest) -> ProcessorResponse:
        with self._lock:
            self.requests.append(request)

            existing = self.charges.get(request.idempotency_key)
            if existing is not None:
                logger.info(f"[MOCK PROCESSOR] Replayed charge for key {request.idempotency_key}")
                return existing

            outcome = self._scripted.pop(0) if self._scripted else None
            if isinstance(outcome, LostResponse):
                self.charges[request.idempotency_key] = outcome.response
                logger.info(f"[MOCK PROCESSOR] Charged order {request.order_id} but dropping the response")
                raise outcome.error
            if isinstance(outcome, Exception):
                logger.info(f"[MOCK PROCESSOR] Raising scripted {type(outcome).__name__} for order {request.order_id}")
                raise outcome

            if outcome is None:
                outcome = ProcessorResponse(
                    success=True,
                    transaction_id=f"{self.transaction_prefix}_{uuid.uuid4().hex[:12]}",
                    status="succeeded",
                )

            self.charges[request.idempotency_key] = outcome
            logger.info(
                f"[MOCK PROCESSOR] Order {request.order_id}: {request.amount} {request.currency} "
                f"-> {'approved' if outcome.success else 'declined'}"
            )
            return outcome

    def lookup(self, idempotency_key: str, order_id: str, credentials: GatewayCredentials) -> Optional[ProcessorResponse]:
        with self._lock:
            self.lookup_calls.append(idempotency_key)
            if self._lookup_error is not None:
                raise self._lookup_error
            return self.charges.get(idempotency_key)

    @property
    def charge_count(self) -> int:
        return len(self.charges)
