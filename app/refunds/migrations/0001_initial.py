import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


def _timestamps():
    return [
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
    ]


def _id():
    return (
        "id",
        models.BigAutoField(
            auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
        ),
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("commerce", "0001_initial"),
        ("payments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="RefundLog",
            fields=[
                _id(),
                *_timestamps(),
                (
                    "refund_type",
                    models.CharField(
                        choices=[("full", "Full"), ("partial", "Partial")],
                        max_length=16,
                    ),
                ),
                (
                    "refund_scope",
                    models.CharField(
                        choices=[
                            ("tickets_only", "Tickets only"),
                            ("tickets_and_donation", "Tickets and donation"),
                            ("donation_only", "Donation only"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "amount_cents",
                    models.PositiveBigIntegerField(help_text="Refund amount in cents"),
                ),
                (
                    "currency",
                    models.CharField(
                        help_text="ISO 4217 currency code (lowercase)", max_length=3
                    ),
                ),
                ("donation_refunded", models.BooleanField(default=False)),
                ("reason", models.TextField(blank=True, null=True)),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Current state of the refund execution (managed by FSM)",
                        max_length=50,
                    ),
                ),
                ("error_message", models.TextField(blank=True, null=True)),
                (
                    "gateway_refund_id",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "completed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the execution reached a terminal status",
                        null=True,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Order being refunded",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_logs",
                        to="commerce.order",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Event the refund is for",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_logs",
                        to="commerce.event",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Account the refund runs on behalf of",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_logs_initiated",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "payment",
                    models.ForeignKey(
                        blank=True,
                        help_text="Payment the refund was drawn from",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="refund_logs",
                        to="payments.payment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Refund log",
                "verbose_name_plural": "Refund logs",
                "db_table": "refunds_refund_log",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["order", "status"], name="refund_log_order_status_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount_cents__gt", 0)),
                        name="refund_log_amount_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="RefundRequest",
            fields=[
                _id(),
                *_timestamps(),
                (
                    "amount_cents",
                    models.PositiveBigIntegerField(
                        help_text="Requested amount in cents (ticket subtotal at request time)"
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        help_text="ISO 4217 currency code (lowercase)", max_length=3
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("requested", "Requested"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="requested",
                        max_length=16,
                    ),
                ),
                (
                    "decision_reason",
                    models.TextField(
                        blank=True,
                        help_text="Vendor's reason for the decision (required when rejected)",
                        null=True,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Order being refunded",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_requests",
                        to="commerce.order",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Event whose tickets are refunded",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_requests",
                        to="commerce.event",
                    ),
                ),
                (
                    "buyer",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Account that requested the refund",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_requests_made",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Account expected to approve or reject",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="refund_requests_received",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "refund_log",
                    models.ForeignKey(
                        blank=True,
                        help_text="Execution record created when the request was approved",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="refunds.refundlog",
                    ),
                ),
            ],
            options={
                "verbose_name": "Refund request",
                "verbose_name_plural": "Refund requests",
                "db_table": "refunds_refund_request",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["event", "status"], name="refund_request_event_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount_cents__gt", 0)),
                        name="refund_request_amount_positive",
                    )
                ],
            },
        ),
        migrations.AddField(
            model_name="refundlog",
            name="refund_request",
            field=models.ForeignKey(
                blank=True,
                help_text="Buyer request this refund was approved from",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="refund_logs",
                to="refunds.refundrequest",
            ),
        ),
    ]
