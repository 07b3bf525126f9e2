from rest_framework import status
from rest_framework.response import Response

from payment_gateway.domain.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    NotFoundError,
    PaymentGatewayError,
    SecurityError,
    TransientGatewayError,
    ValidationError,
)


ERROR_STATUS_CODES = {
    SecurityError: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConfigurationError: status.HTTP_503_SERVICE_UNAVAILABLE,
    TransientGatewayError: status.HTTP_503_SERVICE_UNAVAILABLE,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
}


def error_response(exc: PaymentGatewayError) -> Response:
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exc_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            http_status = code
            break
    return Response({"error": exc.to_dict()}, status=http_status)


def serializer_error_response(errors: dict) -> Response:
    """Flatten DRF field errors into the single structured error the checkout expects."""
    field, messages = next(iter(errors.items()))
    message = messages[0] if isinstance(messages, list) and messages else str(messages)
    return Response(
        {"error": {"code": ValidationError.code, "field": field, "message": str(message)}},
        status=status.HTTP_400_BAD_REQUEST,
    )
