from django.urls import path

from .api.views.checkout_views import CheckoutTokenView, CheckoutView
from .api.views.gateway_views import GatewayDefinitionView
from .api.views.metrics_views import gateway_prometheus_metrics
from .api.views.order_views import OrderDetailView


app_name = "payment_gateway"

urlpatterns = [
    path("gateway/", GatewayDefinitionView.as_view(), name="gateway-definition"),
    path("checkout/token/", CheckoutTokenView.as_view(), name="checkout-token"),
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("orders/<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("metrics/", gateway_prometheus_metrics, name="gateway-metrics"),
]
