import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import payment_gateway.domain.models.order


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "purchase_key",
                    models.CharField(
                        default=payment_gateway.domain.models.order.generate_purchase_key,
                        editable=False,
                        max_length=64,
                        unique=True,
                    ),
                ),
                ("gateway", models.CharField(default="custom_gateway", max_length=50)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("email", models.EmailField(max_length=254)),
                ("purchaser_info", models.JSONField(blank=True, default=dict)),
                ("cart", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("complete", "Complete"), ("failed", "Failed")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("failure_reason", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "gateway_orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="gateway_ord_status_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GatewaySettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "api_key",
                    models.CharField(blank=True, help_text="Enter the API key for your custom gateway", max_length=255),
                ),
                (
                    "secret",
                    models.CharField(
                        blank=True, help_text="Enter the secret key for your custom gateway", max_length=255
                    ),
                ),
                (
                    "test_mode",
                    models.BooleanField(default=False, help_text="Send charges to the processor's test environment"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Gateway Settings",
                "verbose_name_plural": "Gateway Settings",
                "db_table": "gateway_settings",
            },
        ),
        migrations.CreateModel(
            name="ConsumedReplayToken",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("digest", models.CharField(max_length=64, unique=True)),
                ("consumed_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "db_table": "gateway_consumed_tokens",
            },
        ),
        migrations.CreateModel(
            name="TransactionRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transaction_id", models.CharField(db_index=True, max_length=255)),
                ("processor_status", models.CharField(max_length=50)),
                ("created_at", models.DateTimeField()),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transaction_record",
                        to="payment_gateway.order",
                    ),
                ),
            ],
            options={
                "db_table": "gateway_transaction_records",
                "ordering": ["-created_at"],
            },
        ),
    ]
