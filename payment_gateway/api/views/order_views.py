from drf_spectacular.utils import extend_schema
from rest_framework.authentication import BasicAuthentication, SessionAuthentication
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from payment_gateway.api.dependencies import get_container
from payment_gateway.api.serializers.response_serializers import ErrorResponseSerializer, OrderDetailResponseSerializer
from payment_gateway.api.views.errors import error_response
from payment_gateway.domain.exceptions import NotFoundError


class OrderDetailView(APIView):
    """Read-only order record for reporting and admin tooling."""

    authentication_classes = [SessionAuthentication, BasicAuthentication]
    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="order_detail",
        summary="Order detail",
        responses={200: OrderDetailResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Orders"],
    )
    def get(self, request, order_id):
        try:
            order = get_container().ledger().get(order_id)
        except NotFoundError as e:
            return error_response(e)
        return Response(OrderDetailResponseSerializer(order).data)
