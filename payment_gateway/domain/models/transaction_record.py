from django.db import models


class TransactionRecord(models.Model):
    """Processor transaction attached to an order on successful charge. Immutable once written."""

    order = models.OneToOneField(
        "payment_gateway.Order", on_delete=models.PROTECT, related_name="transaction_record"
    )
    transaction_id = models.CharField(max_length=255, db_index=True)
    processor_status = models.CharField(max_length=50)
    created_at = models.DateTimeField()

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("TransactionRecord is immutable once written")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.transaction_id} ({self.processor_status}) for order {self.order_id}"

    class Meta:
        db_table = "gateway_transaction_records"
        ordering = ["-created_at"]
