"""
RefundLog model: the audit record of one refund execution attempt.

A log is written with status pending when a refund is requested, then
moved exactly once to completed or failed by the execution worker.

Usage:
    log = RefundLog.objects.create(order=order, event=event, vendor=vendor, ...)

    # After the gateway accepted the refund
    log.complete(gateway_refund_id="re_123", payment=payment)
    log.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel
from refunds.state_machines import RefundLogStatus, RefundScope, RefundType


class RefundLog(BaseModel):
    """
    One refund execution attempt and its outcome.

    State Flow:
        PENDING -> COMPLETED
        PENDING -> FAILED

    Fields:
        order, event, vendor: What was refunded and who asked for it
        refund_type, refund_scope: How the amount was resolved
        amount_cents: Resolved amount, always positive
        currency: Lower-case order currency
        donation_refunded: Whether donations are part of the amount
        status: Current FSM state
        reason: Free-text reason from the vendor
        error_message: Why execution failed
        gateway_refund_id: Gateway reference of the successful refund
        payment: Payment the refund was drawn from
        refund_request: Buyer request this refund came from, if any
        completed_at: When the log reached a terminal status
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    order = models.ForeignKey(
        "commerce.Order",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_logs",
        help_text="Order being refunded",
    )
    event = models.ForeignKey(
        "commerce.Event",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_logs",
        help_text="Event the refund is for",
    )
    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="refund_logs_initiated",
        help_text="Account the refund runs on behalf of",
    )
    refund_request = models.ForeignKey(
        "refunds.RefundRequest",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="refund_logs",
        help_text="Buyer request this refund was approved from",
    )
    payment = models.ForeignKey(
        "payments.Payment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="refund_logs",
        help_text="Payment the refund was drawn from",
    )

    # ==========================================================================
    # Resolved Refund
    # ==========================================================================

    refund_type = models.CharField(max_length=16, choices=RefundType.choices)
    refund_scope = models.CharField(max_length=32, choices=RefundScope.choices)
    amount_cents = models.PositiveBigIntegerField(
        help_text="Refund amount in cents",
    )
    currency = models.CharField(
        max_length=3,
        help_text="ISO 4217 currency code (lowercase)",
    )
    donation_refunded = models.BooleanField(default=False)
    reason = models.TextField(null=True, blank=True)

    # ==========================================================================
    # Outcome
    # ==========================================================================

    status = FSMField(
        default=RefundLogStatus.PENDING,
        choices=RefundLogStatus.choices,
        db_index=True,
        help_text="Current state of the refund execution (managed by FSM)",
    )
    error_message = models.TextField(null=True, blank=True)
    gateway_refund_id = models.CharField(max_length=255, null=True, blank=True)
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the execution reached a terminal status",
    )

    class Meta:
        db_table = "refunds_refund_log"
        ordering = ["-created_at"]
        verbose_name = "Refund log"
        verbose_name_plural = "Refund logs"
        indexes = [
            models.Index(fields=["order", "status"], name="refund_log_order_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount_cents__gt=0),
                name="refund_log_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"RefundLog({self.pk}, {self.status}, {self.amount_cents} {self.currency})"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=RefundLogStatus.PENDING,
        target=RefundLogStatus.COMPLETED,
    )
    def complete(self, gateway_refund_id: str | None = None, payment=None):
        """Record a successful gateway refund."""
        self.completed_at = timezone.now()
        self.gateway_refund_id = gateway_refund_id
        self.payment = payment

    @transition(
        field=status,
        source=RefundLogStatus.PENDING,
        target=RefundLogStatus.FAILED,
    )
    def fail(self, error_message: str):
        """Record why execution could not refund the order."""
        self.completed_at = timezone.now()
        self.error_message = error_message

    @property
    def is_pending(self) -> bool:
        return self.status == RefundLogStatus.PENDING
