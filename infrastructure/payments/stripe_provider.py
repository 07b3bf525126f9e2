"""
Stripe Payment Processor
=========================

Concrete implementation of PaymentProcessorInterface using Stripe PaymentIntents.

The API key is passed per request from the credentials loaded for the current
processing cycle; the module-level ``stripe.api_key`` is never set.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import stripe

from .interface import (
    ChargeRequest,
    GatewayCredentials,
    PaymentException,
    PaymentProcessorInterface,
    ProcessorAuthenticationError,
    ProcessorResponse,
    ProcessorUnavailableError,
)

logger = logging.getLogger(__name__)

ZERO_DECIMAL_CURRENCIES = frozenset(
    ["BIF", "CLP", "DJF", "GNF", "JPY", "KMF", "KRW", "MGA", "PYG", "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF"]
)

SUCCESS_STATUSES = frozenset(["succeeded", "requires_capture"])

# Accepted but not settled; the outcome is decided later by reconciliation
PENDING_STATUSES = frozenset(["processing"])

TEST_KEY_PREFIXES = ("sk_test_", "rk_test_")
LIVE_KEY_PREFIXES = ("sk_live_", "rk_live_")

TRANSIENT_ERRORS = (
    stripe.APIConnectionError,
    stripe.RateLimitError,
    stripe.APIError,
)


def to_minor_units(amount: Decimal, currency: str) -> int:
    """Convert a major-unit amount to Stripe's smallest currency unit."""
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def check_key_mode(credentials: GatewayCredentials) -> None:
    """
    Refuse a secret key whose mode disagrees with ``credentials.test_mode``.

    Keys without a recognised prefix are left for Stripe to judge.
    """
    secret = credentials.secret or ""
    if credentials.test_mode and secret.startswith(LIVE_KEY_PREFIXES):
        raise ProcessorAuthenticationError("Test mode is enabled but a live Stripe secret key is configured")
    if not credentials.test_mode and secret.startswith(TEST_KEY_PREFIXES):
        raise ProcessorAuthenticationError("Test mode is disabled but a test Stripe secret key is configured")


class StripeProcessor(PaymentProcessorInterface):
    """
    Stripe payment processor.

    The purchaser's payment method id is read from ``ChargeRequest.payment_method``
    (collected client-side with Stripe.js and forwarded in ``purchaser_info``).
    """

    def charge(self, request: ChargeRequest) -> ProcessorResponse:
        check_key_mode(request.credentials)

        if not request.payment_method:
            logger.warning(f"Stripe charge for order {request.order_id} rejected: no payment method supplied")
            return ProcessorResponse(success=False, status="requires_payment_method", reason="missing_payment_method")

        params = {
            "amount": to_minor_units(request.amount, request.currency),
            "currency": request.currency.lower(),
            "payment_method": request.payment_method,
            "confirm": True,
            "metadata": {"order_id": request.order_id},
            "automatic_payment_methods": {"enabled": True, "allow_redirects": "never"},
            "idempotency_key": request.idempotency_key,
            "api_key": request.credentials.secret,
        }
        if request.email:
            params["receipt_email"] = request.email

        try:
            intent = stripe.PaymentIntent.create(**params)
        except stripe.CardError as e:
            reason = getattr(e, "code", None) or "card_declined"
            logger.info(f"Stripe declined order {request.order_id}: {reason}")
            return ProcessorResponse(success=False, status="declined", reason=reason)
        except stripe.InvalidRequestError as e:
            logger.warning(f"Stripe rejected request for order {request.order_id}: {str(e)}")
            return ProcessorResponse(success=False, status="invalid_request", reason=getattr(e, "code", None) or "invalid_request")
        except (stripe.AuthenticationError, stripe.PermissionError) as e:
            logger.error(f"Stripe authentication failed for order {request.order_id}: {str(e)}")
            raise ProcessorAuthenticationError("Stripe rejected the configured credentials") from e
        except TRANSIENT_ERRORS as e:
            logger.warning(f"Stripe unavailable while charging order {request.order_id}: {str(e)}")
            raise ProcessorUnavailableError(f"Stripe unavailable: {str(e)}") from e
        except stripe.StripeError as e:
            logger.error(f"Unexpected Stripe error charging order {request.order_id}: {str(e)}")
            raise PaymentException(f"Stripe charge failed: {str(e)}") from e

        logger.info(f"Stripe PaymentIntent {intent.id} for order {request.order_id} is {intent.status}")
        return self._to_response(intent)

    def lookup(self, idempotency_key: str, order_id: str, credentials: GatewayCredentials) -> Optional[ProcessorResponse]:
        """
        Find the order's PaymentIntent through the Search API.

        Search results lag recent writes by up to about a minute, so ``None``
        right after a charge attempt does not prove that no charge exists.
        """
        check_key_mode(credentials)

        try:
            result = stripe.PaymentIntent.search(
                query=f"metadata['order_id']:'{order_id}'",
                api_key=credentials.secret,
            )
        except (stripe.AuthenticationError, stripe.PermissionError) as e:
            raise ProcessorAuthenticationError("Stripe rejected the configured credentials") from e
        except stripe.StripeError as e:
            logger.warning(f"Stripe lookup for order {order_id} failed: {str(e)}")
            raise ProcessorUnavailableError(f"Stripe lookup failed: {str(e)}") from e

        intents = list(result.data)
        if not intents:
            return None

        for statuses in (SUCCESS_STATUSES, PENDING_STATUSES):
            for intent in intents:
                if intent.status in statuses:
                    return self._to_response(intent)
        return self._to_response(intents[0])

    @staticmethod
    def _to_response(intent) -> ProcessorResponse:
        if intent.status in SUCCESS_STATUSES:
            return ProcessorResponse(success=True, transaction_id=intent.id, status=intent.status)
        if intent.status in PENDING_STATUSES:
            return ProcessorResponse(success=False, transaction_id=intent.id, status=intent.status, pending=True)

        reason = intent.status
        last_error = getattr(intent, "last_payment_error", None)
        if last_error:
            reason = getattr(last_error, "code", None) or getattr(last_error, "decline_code", None) or reason
        return ProcessorResponse(success=False, transaction_id=intent.id, status=intent.status, reason=reason)
