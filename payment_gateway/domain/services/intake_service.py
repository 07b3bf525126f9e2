"""
OrderIntakeService - validates checkout submissions and records pending orders.

Nothing is persisted until every check has passed; the anti-replay token is
spent in the same transaction that creates the order.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import transaction

from payment_gateway.domain.exceptions import ValidationError
from payment_gateway.domain.models import Order
from payment_gateway.domain.services.order_ledger import OrderDraft, OrderLedger
from payment_gateway.domain.services.token_service import AntiReplayTokenService
from utils.logging_utils import summarize_submission
from utils.service_base import BaseService


CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")
MAX_AMOUNT = Decimal("9999999999.99")


class OrderIntakeService(BaseService):
    def __init__(self, ledger: OrderLedger, token_service: AntiReplayTokenService, gateway_id: str = "custom_gateway"):
        super().__init__()
        self.ledger = ledger
        self.token_service = token_service
        self.gateway_id = gateway_id

    @BaseService.log_performance
    def submit(self, submission: Mapping[str, Any]) -> Order:
        """
        Validate a raw submission and create its pending order.

        Raises:
            SecurityError: token absent, forged, expired or already used
            ValidationError: malformed email, amount, currency, cart or purchaser info
        """
        self.logger.info(f"Checkout submission received: {summarize_submission(submission)}")

        token = submission.get("anti_replay_token")
        self.token_service.verify(token)

        draft = OrderDraft(
            email=self.clean_email(submission.get("email")),
            amount=self.clean_amount(submission.get("amount")),
            currency=self.clean_currency(submission.get("currency")),
            purchaser_info=self.clean_purchaser_info(submission.get("purchaser_info")),
            cart=self.clean_cart(submission.get("cart")),
            gateway=self.gateway_id,
        )

        with transaction.atomic():
            self.token_service.consume(token)
            return self.ledger.create_pending(draft)

    @staticmethod
    def clean_email(value) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Email address is required", field="email")
        email = value.strip()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError("Enter a valid email address", field="email")
        return email

    @staticmethod
    def clean_amount(value) -> Decimal:
        if value is None or isinstance(value, bool):
            raise ValidationError("Amount is required", field="amount")
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError("Amount must be a number", field="amount")

        if not amount.is_finite():
            raise ValidationError("Amount must be a number", field="amount")
        if amount <= 0:
            raise ValidationError("Amount must be positive", field="amount")
        if amount.as_tuple().exponent < -2:
            raise ValidationError("Amount cannot have more than 2 decimal places", field="amount")
        if amount > MAX_AMOUNT:
            raise ValidationError("Amount exceeds the maximum supported value", field="amount")
        return amount.quantize(Decimal("0.01"))

    @staticmethod
    def clean_currency(value) -> str:
        if not isinstance(value, str) or not CURRENCY_PATTERN.match(value.strip()):
            raise ValidationError("Currency must be a 3-letter ISO code", field="currency")
        return value.strip().upper()

    @staticmethod
    def clean_cart(value) -> list:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError("Cart must be a list of line items", field="cart")
        return list(value)

    @staticmethod
    def clean_purchaser_info(value) -> dict:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValidationError("Purchaser info must be an object", field="purchaser_info")
        return dict(value)
