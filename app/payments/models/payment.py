"""
Payment model for money captured against a commerce order.

An order may carry several payments (split tender, a retried checkout).
Each payment tracks how much of it has already gone back to the customer,
so refunds can be drawn from whichever payment still has room.

Usage:
    from payments.models import Payment
    from payments.state_machines import PaymentState

    payment = Payment.objects.create(
        order=order,
        amount=Decimal("75.00"),
        currency="AUD",
        state=PaymentState.COMPLETED,
        remote_id="pi_3Nx...",
    )

    # After the gateway confirms a refund of 25.00
    payment.record_refund(Decimal("25.00"))
    payment.save()
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from django_fsm import FSMField, transition

from core.models import BaseModel
from payments.state_machines import PaymentState


class Payment(BaseModel):
    """
    Money captured for an order by a payment gateway.

    State Flow:
        COMPLETED -> PARTIALLY_REFUNDED -> REFUNDED
        COMPLETED -> REFUNDED

    Fields:
        order: Commerce order this payment settles
        gateway: Gateway identifier (only "stripe" is wired up)
        remote_id: Gateway reference used to refund (Stripe PaymentIntent id)
        amount: Captured amount
        refunded_amount: Total refunded so far, starts at zero
        currency: ISO 4217 currency code
        state: Current FSM state
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    order = models.ForeignKey(
        "commerce.Order",
        on_delete=models.CASCADE,
        related_name="payments",
        help_text="Order this payment settles",
    )

    # ==========================================================================
    # Gateway
    # ==========================================================================

    gateway = models.CharField(
        max_length=32,
        default="stripe",
        help_text="Payment gateway that captured this payment",
    )

    remote_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Gateway reference for this payment (Stripe PaymentIntent ID)",
    )

    # ==========================================================================
    # Amounts
    # ==========================================================================

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Captured amount",
    )

    refunded_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Amount refunded so far",
    )

    currency = models.CharField(
        max_length=3,
        default="AUD",
        help_text="ISO 4217 currency code",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    state = FSMField(
        default=PaymentState.NEW,
        choices=PaymentState.choices,
        db_index=True,
        help_text="Current state of the payment (managed by FSM)",
    )

    class Meta:
        ordering = ["id"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=["order", "state"], name="payment_order_state_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(refunded_amount__gte=0),
                name="payment_refunded_amount_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Payment({self.pk}, {self.state}, {self.amount} {self.currency})"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=state,
        source=[PaymentState.COMPLETED, PaymentState.PARTIALLY_REFUNDED],
        target=PaymentState.PARTIALLY_REFUNDED,
    )
    def refund_partially(self, amount: Decimal):
        """Add a partial refund; some of the payment remains."""
        self.refunded_amount = (self.refunded_amount or Decimal("0")) + amount

    @transition(
        field=state,
        source=[PaymentState.COMPLETED, PaymentState.PARTIALLY_REFUNDED],
        target=PaymentState.REFUNDED,
    )
    def refund_fully(self, amount: Decimal):
        """Add the refund that exhausts the payment."""
        self.refunded_amount = (self.refunded_amount or Decimal("0")) + amount

    def record_refund(self, amount: Decimal) -> None:
        """
        Apply a gateway-confirmed refund of ``amount`` to this payment.

        Picks the transition from what remains afterwards.

        Raises:
            TransitionNotAllowed: If the payment is not in a refundable state
        """
        remaining = self.amount - (self.refunded_amount or Decimal("0")) - amount
        if remaining <= 0:
            self.refund_fully(amount)
        else:
            self.refund_partially(amount)

    @property
    def remaining_amount(self) -> Decimal:
        return self.amount - (self.refunded_amount or Decimal("0"))
