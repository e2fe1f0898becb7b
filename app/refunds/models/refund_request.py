"""
RefundRequest model: a buyer-initiated refund awaiting a vendor decision.

Rows are written through refunds.services.ledger.RefundRequestLedger.
The ledger stores whatever it is given; the orchestrator decides which
status changes are legal.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel
from refunds.state_machines import RefundRequestStatus


class RefundRequest(BaseModel):
    """
    A buyer's request to refund the tickets of one order for one event.

    Fields:
        order: Order being refunded
        event: Event whose tickets are refunded
        buyer: Account that asked
        vendor: Account expected to decide (the event owner at request time)
        amount_cents: Ticket subtotal at request time, never includes donations
        currency: Lower-case order currency
        status: One of RefundRequestStatus
        decision_reason: Vendor's reason, required when rejected
        refund_log: Execution record created on approval

    Note:
        Foreign keys to commerce rows do not enforce referential
        integrity, so a request outlives deleted orders and events.
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    order = models.ForeignKey(
        "commerce.Order",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_requests",
        help_text="Order being refunded",
    )
    event = models.ForeignKey(
        "commerce.Event",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_requests",
        help_text="Event whose tickets are refunded",
    )
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_requests_made",
        help_text="Account that requested the refund",
    )
    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_requests_received",
        help_text="Account expected to approve or reject",
    )

    # ==========================================================================
    # Amount & Currency
    # ==========================================================================

    amount_cents = models.PositiveBigIntegerField(
        help_text="Requested amount in cents (ticket subtotal at request time)",
    )
    currency = models.CharField(
        max_length=3,
        help_text="ISO 4217 currency code (lowercase)",
    )

    # ==========================================================================
    # Decision
    # ==========================================================================

    status = models.CharField(
        max_length=16,
        choices=RefundRequestStatus.choices,
        default=RefundRequestStatus.REQUESTED,
        db_index=True,
    )
    decision_reason = models.TextField(
        null=True,
        blank=True,
        help_text="Vendor's reason for the decision (required when rejected)",
    )
    refund_log = models.ForeignKey(
        "refunds.RefundLog",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Execution record created when the request was approved",
    )

    class Meta:
        db_table = "refunds_refund_request"
        ordering = ["-created_at"]
        verbose_name = "Refund request"
        verbose_name_plural = "Refund requests"
        indexes = [
            models.Index(fields=["event", "status"], name="refund_request_event_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount_cents__gt=0),
                name="refund_request_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"RefundRequest({self.pk}, {self.status}, {self.amount_cents} {self.currency})"
