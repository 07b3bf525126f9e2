import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from payment_gateway.api.dependencies import get_container, get_order_processor
from payment_gateway.api.serializers.request_serializers import CheckoutSubmissionRequestSerializer
from payment_gateway.api.serializers.response_serializers import (
    CheckoutOutcomeResponseSerializer,
    CheckoutTokenResponseSerializer,
    ErrorResponseSerializer,
)
from payment_gateway.api.views.errors import error_response, serializer_error_response
from payment_gateway.domain.exceptions import PaymentGatewayError
from payment_gateway.domain.models import Order
from payment_gateway.infra.observability.metrics import checkout_rejections_total


logger = logging.getLogger(__name__)

OUTCOME_STATUS_CODES = {
    Order.STATUS_COMPLETE: status.HTTP_200_OK,
    Order.STATUS_FAILED: status.HTTP_402_PAYMENT_REQUIRED,
    Order.STATUS_PENDING: status.HTTP_202_ACCEPTED,
}


class CheckoutTokenView(APIView):
    """Issue a single-use anti-replay token for the next checkout submission."""

    authentication_classes = []

    @extend_schema(
        operation_id="checkout_token_create",
        summary="Issue checkout token",
        request=None,
        responses={201: CheckoutTokenResponseSerializer},
        tags=["Checkout"],
    )
    def post(self, request):
        token_service = get_container().token_service()
        data = {"anti_replay_token": token_service.issue(), "expires_in": token_service.max_age}
        return Response(CheckoutTokenResponseSerializer(data).data, status=status.HTTP_201_CREATED)


class CheckoutView(APIView):
    """Accept a checkout submission, charge it through the gateway and report the outcome."""

    authentication_classes = []

    @extend_schema(
        operation_id="checkout_submit",
        summary="Submit checkout",
        request=CheckoutSubmissionRequestSerializer,
        responses={
            200: CheckoutOutcomeResponseSerializer,
            202: OpenApiResponse(CheckoutOutcomeResponseSerializer, description="Order awaiting reconciliation"),
            402: OpenApiResponse(CheckoutOutcomeResponseSerializer, description="Payment declined"),
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
        tags=["Checkout"],
    )
    def post(self, request):
        serializer = CheckoutSubmissionRequestSerializer(data=request.data)
        if not serializer.is_valid():
            checkout_rejections_total.labels(code="validation_error").inc()
            return serializer_error_response(serializer.errors)

        try:
            outcome = get_order_processor().checkout(serializer.validated_data)
        except PaymentGatewayError as e:
            checkout_rejections_total.labels(code=e.code).inc()
            logger.info(f"Checkout rejected ({e.code}): {e.message}")
            return error_response(e)

        payload = CheckoutOutcomeResponseSerializer(outcome).data
        return Response(payload, status=OUTCOME_STATUS_CODES[outcome.status])
