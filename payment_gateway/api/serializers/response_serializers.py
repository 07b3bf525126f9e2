from rest_framework import serializers

from payment_gateway.models import Order, TransactionRecord


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    field = serializers.CharField(allow_null=True)
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


class CheckoutTokenResponseSerializer(serializers.Serializer):
    anti_replay_token = serializers.CharField()
    expires_in = serializers.IntegerField(help_text="Seconds until the token expires")


class CheckoutOutcomeResponseSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    purchase_key = serializers.CharField()
    redirect_url = serializers.CharField()
    transaction_id = serializers.CharField(allow_null=True)
    reason = serializers.CharField(allow_null=True)


class SettingsFieldSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    desc = serializers.CharField()
    type = serializers.CharField()
    size = serializers.CharField(allow_null=True)
    required = serializers.BooleanField()
    sensitive = serializers.BooleanField()


class GatewayDescriptionResponseSerializer(serializers.Serializer):
    gateway_id = serializers.CharField()
    admin_label = serializers.CharField()
    checkout_label = serializers.CharField()
    test_mode = serializers.BooleanField()
    settings_fields = SettingsFieldSerializer(many=True)


class TransactionRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = TransactionRecord
        fields = ["transaction_id", "processor_status", "created_at"]
        read_only_fields = fields


class OrderDetailResponseSerializer(serializers.ModelSerializer):
    transaction_record = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "purchase_key",
            "gateway",
            "amount",
            "currency",
            "email",
            "cart",
            "status",
            "failure_reason",
            "transaction_record",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_transaction_record(self, obj):
        record = getattr(obj, "transaction_record", None)
        if record is None:
            return None
        return TransactionRecordSerializer(record).data
