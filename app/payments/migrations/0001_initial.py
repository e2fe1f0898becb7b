from decimal import Decimal

import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("commerce", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "gateway",
                    models.CharField(
                        default="stripe",
                        help_text="Payment gateway that captured this payment",
                        max_length=32,
                    ),
                ),
                (
                    "remote_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Gateway reference for this payment (Stripe PaymentIntent ID)",
                        max_length=255,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2, help_text="Captured amount", max_digits=12
                    ),
                ),
                (
                    "refunded_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Amount refunded so far",
                        max_digits=12,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default="AUD", help_text="ISO 4217 currency code", max_length=3
                    ),
                ),
                (
                    "state",
                    django_fsm.FSMField(
                        choices=[
                            ("new", "New"),
                            ("authorized", "Authorized"),
                            ("completed", "Completed"),
                            ("partially_refunded", "Partially Refunded"),
                            ("refunded", "Refunded"),
                            ("voided", "Voided"),
                        ],
                        db_index=True,
                        default="new",
                        help_text="Current state of the payment (managed by FSM)",
                        max_length=50,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        help_text="Order this payment settles",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="commerce.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["id"],
                "indexes": [
                    models.Index(
                        fields=["order", "state"], name="payment_order_state_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("refunded_amount__gte", 0)),
                        name="payment_refunded_amount_non_negative",
                    )
                ],
            },
        ),
    ]
