"""
Payment admin configuration.
"""

from django.contrib import admin

from payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin configuration for Payment.

    Refunded amounts and state are written by the refund gateway only.
    """

    list_display = [
        "id",
        "order",
        "gateway",
        "remote_id",
        "amount",
        "refunded_amount",
        "currency",
        "state",
        "created_at",
    ]
    list_filter = ["state", "gateway", "currency"]
    search_fields = ["id", "remote_id", "order__order_number", "order__email"]
    readonly_fields = ["refunded_amount", "state", "created_at", "updated_at"]
    raw_id_fields = ["order"]
    ordering = ["-created_at"]
