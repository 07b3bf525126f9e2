from django.http import HttpResponse
from prometheus_client import generate_latest
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def gateway_prometheus_metrics(request):
    """
    Exposes Prometheus metrics for the payment gateway.
    """
    metrics_content = generate_latest()
    return HttpResponse(metrics_content, content_type="text/plain; version=0.0.4; charset=utf-8")
