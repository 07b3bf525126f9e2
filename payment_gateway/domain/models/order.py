import secrets
import uuid

from django.core.validators import MinValueValidator
from django.db import models


def generate_purchase_key():
    return secrets.token_hex(16)


class Order(models.Model):
    """A single checkout attempt and its outcome. Status is written only by OrderLedger."""

    STATUS_PENDING = "pending"
    STATUS_COMPLETE = "complete"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETE, "Complete"),
        (STATUS_FAILED, "Failed"),
    ]

    TERMINAL_STATUSES = (STATUS_COMPLETE, STATUS_FAILED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase_key = models.CharField(max_length=64, unique=True, default=generate_purchase_key, editable=False)
    gateway = models.CharField(max_length=50, default="custom_gateway")

    # Money
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, default="USD")

    # Purchaser and cart snapshot (opaque to the gateway)
    email = models.EmailField()
    purchaser_info = models.JSONField(default=dict, blank=True)
    cart = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    failure_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order {self.id} - {self.amount} {self.currency} [{self.status}]"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    class Meta:
        db_table = "gateway_orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="gateway_ord_status_created_idx"),
        ]
