from rest_framework import serializers


class CheckoutSubmissionRequestSerializer(serializers.Serializer):
    """Shape check only; values are validated by OrderIntakeService."""

    amount = serializers.CharField(required=True, help_text="Decimal amount as a string, e.g. '49.99'")
    currency = serializers.CharField(required=True, help_text="ISO 4217 currency code")
    email = serializers.CharField(required=True, help_text="Purchaser email address")
    purchaser_info = serializers.JSONField(required=False, default=dict, help_text="Opaque purchaser details")
    cart = serializers.ListField(
        child=serializers.JSONField(), required=False, default=list, help_text="Ordered cart line items"
    )
    anti_replay_token = serializers.CharField(
        required=False, allow_blank=True, default="", help_text="Token obtained from the checkout token endpoint"
    )
