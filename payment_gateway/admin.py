from django import forms
from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import GatewaySettings, Order, TransactionRecord


class TransactionRecordInline(admin.StackedInline):
    model = TransactionRecord
    can_delete = False
    extra = 0
    max_num = 0
    readonly_fields = ["transaction_id", "processor_status", "created_at"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Orders are written by the gateway; admin access is read-only."""

    list_display = ["id_short", "email", "status_badge", "amount_display", "gateway", "transaction_link", "created_at"]
    list_filter = ["status", "currency", "gateway", "created_at"]
    search_fields = ["id", "purchase_key", "email", "transaction_record__transaction_id"]
    inlines = [TransactionRecordInline]

    readonly_fields = [
        "id",
        "purchase_key",
        "gateway",
        "amount",
        "currency",
        "email",
        "purchaser_info",
        "cart",
        "status",
        "failure_reason",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        ("Basic Information", {"fields": ("id", "purchase_key", "gateway", "status", "failure_reason")}),
        ("Payment", {"fields": ("amount", "currency")}),
        ("Purchaser", {"fields": ("email", "purchaser_info", "cart")}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def id_short(self, obj):
        return str(obj.id)[:8] + "..."

    id_short.short_description = "ID"

    def status_badge(self, obj):
        colors = {
            "complete": "green",
            "failed": "red",
            "pending": "orange",
        }
        color = colors.get(obj.status, "black")
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, obj.get_status_display())

    status_badge.short_description = "Status"

    def amount_display(self, obj):
        return f"{obj.amount:.2f} {obj.currency}"

    amount_display.short_description = "Amount"

    def transaction_link(self, obj):
        record = getattr(obj, "transaction_record", None)
        if record is None:
            return "-"
        url = reverse("admin:payment_gateway_transactionrecord_change", args=[record.pk])
        return format_html('<a href="{}">{}</a>', url, record.transaction_id)

    transaction_link.short_description = "Transaction"


@admin.register(TransactionRecord)
class TransactionRecordAdmin(admin.ModelAdmin):
    list_display = ["transaction_id", "processor_status", "order_link", "created_at"]
    search_fields = ["transaction_id", "order__id"]
    readonly_fields = ["order", "transaction_id", "processor_status", "created_at"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def order_link(self, obj):
        url = reverse("admin:payment_gateway_order_change", args=[obj.order_id])
        return format_html('<a href="{}">{}</a>', url, str(obj.order_id)[:8])

    order_link.short_description = "Order"


class GatewaySettingsForm(forms.ModelForm):
    secret = forms.CharField(
        widget=forms.PasswordInput(render_value=True),
        required=False,
        help_text=GatewaySettings._meta.get_field("secret").help_text,
    )

    class Meta:
        model = GatewaySettings
        fields = ["api_key", "secret", "test_mode"]


@admin.register(GatewaySettings)
class GatewaySettingsAdmin(admin.ModelAdmin):
    """The administrative interface through which gateway credentials are rotated."""

    form = GatewaySettingsForm
    list_display = ["__str__", "api_key_configured", "secret_configured", "test_mode", "updated_at"]
    fieldsets = (
        (
            "Custom Gateway Settings",
            {
                "description": "Configure your custom payment gateway settings",
                "fields": ("api_key", "secret", "test_mode"),
            },
        ),
    )

    def has_add_permission(self, request):
        return not GatewaySettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(boolean=True, description="API key")
    def api_key_configured(self, obj):
        return bool(obj.api_key)

    @admin.display(boolean=True, description="Secret")
    def secret_configured(self, obj):
        return bool(obj.secret)
