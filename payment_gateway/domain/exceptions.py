from typing import Optional


class PaymentGatewayError(Exception):
    """Base class for payment gateway exceptions."""

    code = "payment_gateway_error"

    def __init__(self, message: str = "", field: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__
        self.field = field

    def to_dict(self) -> dict:
        return {"code": self.code, "field": self.field, "message": self.message}


class SecurityError(PaymentGatewayError):
    """Raised when the anti-replay token is missing, invalid, expired or reused."""

    code = "security_error"


class ValidationError(PaymentGatewayError):
    """Raised when checkout submission data is malformed."""

    code = "validation_error"


class ConfigurationError(PaymentGatewayError):
    """Raised when gateway credentials are missing or rejected."""

    code = "configuration_error"


class PaymentDeclinedError(PaymentGatewayError):
    """Raised when the processor declines the charge."""

    code = "payment_declined"

    def __init__(self, reason: str, message: str = ""):
        super().__init__(message or f"Payment declined: {reason}")
        self.reason = reason


class TransientGatewayError(PaymentGatewayError):
    """Raised when the processor cannot be reached or fails server-side."""

    code = "gateway_unavailable"


class ChargePendingError(TransientGatewayError):
    """Raised when the processor accepted a charge that has not settled yet."""

    code = "charge_pending"

    def __init__(self, transaction_id: str, status: str = ""):
        super().__init__(f"Charge {transaction_id} is still {status or 'pending'} at the processor")
        self.transaction_id = transaction_id
        self.status = status


class NotFoundError(PaymentGatewayError):
    """Raised when an order identifier is unknown to the ledger."""

    code = "order_not_found"


class InvalidTransitionError(PaymentGatewayError):
    """Raised when a status change is attempted on an order that is already terminal."""

    code = "invalid_transition"

    def __init__(self, order_id, current_status: str, target_status: str):
        super().__init__(f"Order {order_id} is {current_status}; cannot move to {target_status}")
        self.order_id = order_id
        self.current_status = current_status
        self.target_status = target_status
