import django.db.models.deletion
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
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Store",
            fields=[
                _id(),
                *_timestamps(),
                ("name", models.CharField(max_length=200)),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="Account that owns this store",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stores",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                _id(),
                *_timestamps(),
                ("title", models.CharField(max_length=255)),
                ("venue_name", models.CharField(blank=True, max_length=255)),
                (
                    "starts_at",
                    models.DateTimeField(blank=True, help_text="Event start time", null=True),
                ),
                (
                    "refund_policy",
                    models.CharField(
                        choices=[
                            ("1_day", "Up to 1 day before the event"),
                            ("7_days", "Up to 7 days before the event"),
                            ("14_days", "Up to 14 days before the event"),
                            ("30_days", "Up to 30 days before the event"),
                            ("case_by_case", "Case by case"),
                            ("none", "No refunds"),
                            ("refund_24h", "Up to 24 hours before the event (legacy)"),
                            ("refund_7d", "Up to 7 days before the event (legacy)"),
                            ("no_refunds", "No refunds (legacy)"),
                            ("none_specified", "Not specified"),
                        ],
                        default="none",
                        help_text="Buyer self-service refund policy",
                        max_length=32,
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="Vendor account that owns this event",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        blank=True,
                        help_text="Store the event is sold under",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="commerce.store",
                    ),
                ),
            ],
            options={
                "ordering": ["-starts_at"],
                "permissions": [
                    ("administer_refunds", "Can administer refunds on any event")
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                _id(),
                *_timestamps(),
                (
                    "order_number",
                    models.CharField(blank=True, db_index=True, max_length=64),
                ),
                (
                    "email",
                    models.EmailField(
                        blank=True,
                        help_text="Contact email captured at checkout",
                        max_length=254,
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("placed", "Placed"),
                            ("completed", "Completed"),
                            ("fulfilled", "Fulfilled"),
                            ("canceled", "Canceled"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Order total",
                        max_digits=12,
                        null=True,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        blank=True,
                        help_text="ISO 4217 currency code of the order total",
                        max_length=3,
                    ),
                ),
                ("placed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        help_text="Buyer account (empty for guest checkout)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                _id(),
                *_timestamps(),
                (
                    "bundle",
                    models.CharField(
                        choices=[
                            ("ticket", "Ticket"),
                            ("checkout_donation", "Checkout donation"),
                            ("platform_donation", "Platform donation"),
                            ("rsvp_donation", "RSVP donation"),
                        ],
                        default="ticket",
                        help_text="Item kind; donation bundles are tracked apart from tickets",
                        max_length=64,
                    ),
                ),
                ("title", models.CharField(blank=True, max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                (
                    "total_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Line total (unit price x quantity, after adjustments)",
                        max_digits=12,
                        null=True,
                    ),
                ),
                ("currency", models.CharField(blank=True, max_length=3)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="commerce.order",
                    ),
                ),
                (
                    "target_event",
                    models.ForeignKey(
                        blank=True,
                        help_text="Event this item grants admission to or donates towards",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_items",
                        to="commerce.event",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
    ]
