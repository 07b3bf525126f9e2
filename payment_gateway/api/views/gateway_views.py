from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from payment_gateway.api.dependencies import get_container
from payment_gateway.api.serializers.response_serializers import GatewayDescriptionResponseSerializer
from payment_gateway.domain.services.gateway_registry import describe_gateway


class GatewayDefinitionView(APIView):
    """Gateway labels and settings fields, for listing the gateway at checkout."""

    authentication_classes = []

    @extend_schema(
        operation_id="gateway_definition",
        summary="Gateway definition",
        responses={200: GatewayDescriptionResponseSerializer},
        tags=["Gateway"],
    )
    def get(self, request):
        test_mode = get_container().settings_store().get_credentials().test_mode
        return Response(GatewayDescriptionResponseSerializer(describe_gateway(test_mode=test_mode)).data)
