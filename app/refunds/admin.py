"""
Refund admin configuration.

Refund requests and logs are the audit trail of every refund decision and
execution: they are visible in the admin but never added, edited or deleted
there.
"""

from django.contrib import admin

from refunds.models import RefundLog, RefundRequest


class ReadOnlyAuditAdmin(admin.ModelAdmin):
    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        """Disable delete for refund records (audit trail)."""
        return False


@admin.register(RefundRequest)
class RefundRequestAdmin(ReadOnlyAuditAdmin):
    list_display = [
        "id",
        "order_id",
        "event_id",
        "buyer_id",
        "vendor_id",
        "amount_cents",
        "currency",
        "status",
        "created_at",
    ]
    list_filter = ["status", "currency"]
    search_fields = ["id", "order__order_number", "decision_reason"]
    ordering = ["-created_at"]


@admin.register(RefundLog)
class RefundLogAdmin(ReadOnlyAuditAdmin):
    """
    Admin configuration for RefundLog.

    Failed executions carry their error message; completed ones carry the
    gateway refund id.
    """

    list_display = [
        "id",
        "order_id",
        "event_id",
        "refund_type",
        "refund_scope",
        "amount_cents",
        "currency",
        "status",
        "gateway_refund_id",
        "created_at",
        "completed_at",
    ]
    list_filter = ["status", "refund_type", "refund_scope", "donation_refunded"]
    search_fields = ["id", "gateway_refund_id", "order__order_number", "error_message"]
    ordering = ["-created_at"]
