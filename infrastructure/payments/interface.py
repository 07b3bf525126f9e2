"""
Payment Processor Interface
============================

Abstract base class defining the contract for charging an order through an
external payment processor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class GatewayCredentials:
    """
    Gateway credentials as loaded from the settings store.

    ``api_key`` and ``secret`` are excluded from ``repr`` so the object can be
    passed to loggers without leaking them.
    """

    api_key: str = field(default="", repr=False)
    secret: str = field(default="", repr=False)
    test_mode: bool = False

    def is_complete(self) -> bool:
        return bool(self.api_key and self.api_key.strip() and self.secret and self.secret.strip())

    def missing_fields(self) -> list:
        missing = []
        if not (self.api_key and self.api_key.strip()):
            missing.append("api_key")
        if not (self.secret and self.secret.strip()):
            missing.append("secret")
        return missing


@dataclass(frozen=True)
class ChargeRequest:
    """
    Outbound charge request.

    Attributes:
        order_id: Local order identifier
        amount: Amount in major currency unit (e.g. 49.99)
        currency: ISO currency code (upper case)
        credentials: Credentials the processor call is authenticated with
        idempotency_key: Key that makes repeated requests for one order a single charge
        email: Purchaser email, forwarded as receipt email where supported
        payment_method: Processor-side payment method token, if the host collected one
    """

    order_id: str
    amount: Decimal
    currency: str
    credentials: GatewayCredentials
    idempotency_key: str
    email: Optional[str] = None
    payment_method: Optional[str] = None


@dataclass(frozen=True)
class ProcessorResponse:
    """
    Processor response.

    Attributes:
        success: True when the processor accepted the charge
        transaction_id: Processor transaction identifier (empty on decline)
        status: Raw processor status string
        reason: Decline reason when success is False
        pending: True when the processor accepted the charge but has not settled it yet;
            such a response is neither an approval nor a decline
    """

    success: bool
    transaction_id: str = ""
    status: str = ""
    reason: Optional[str] = None
    pending: bool = False


class PaymentProcessorInterface(ABC):
    """
    Abstract interface for payment processors.

    Concrete implementations:
        - StripeProcessor: Stripe PaymentIntents
        - MockProcessor: in-memory processor for tests and development
    """

    @abstractmethod
    def charge(self, request: ChargeRequest) -> ProcessorResponse:
        """
        Request a charge for an order.

        Implementations must treat ``request.idempotency_key`` as the identity of
        the charge: repeating a request with the same key must not charge twice.

        Returns:
            ProcessorResponse (``success=False`` for business declines)

        Raises:
            ProcessorUnavailableError: Network failure, timeout, rate limit or 5xx
            ProcessorAuthenticationError: Credentials rejected by the processor
        """
        pass

    @abstractmethod
    def lookup(self, idempotency_key: str, order_id: str, credentials: GatewayCredentials) -> Optional[ProcessorResponse]:
        """
        Look up the outcome of an earlier charge attempt.

        Returns:
            ProcessorResponse for a recorded attempt, or None when the processor
            confirms that no charge exists for the key

        A processor whose lookup index is eventually consistent may return None
        for a charge made moments ago; callers only treat None as proof of
        absence once the attempt is old enough.

        Raises:
            ProcessorUnavailableError: If the processor cannot be queried
        """
        pass


class PaymentException(Exception):
    """Base exception for payment processor operations."""

    pass


class ProcessorUnavailableError(PaymentException):
    """Raised for network errors, timeouts and processor-side (5xx) failures."""

    pass


class ProcessorAuthenticationError(PaymentException):
    """Raised when the processor rejects the configured credentials."""

    pass
