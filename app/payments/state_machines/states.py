"""
State enums for payment models.

Payment States:
    new → authorized → completed
    completed → partially_refunded → refunded
    completed → refunded
    new/authorized → voided
"""

from django.db import models


class PaymentState(models.TextChoices):
    """
    States for the Payment model lifecycle.

    Only COMPLETED and PARTIALLY_REFUNDED payments have money left that a
    refund can draw on. REFUNDED and VOIDED are terminal.
    """

    NEW = "new", "New"
    AUTHORIZED = "authorized", "Authorized"
    COMPLETED = "completed", "Completed"
    PARTIALLY_REFUNDED = "partially_refunded", "Partially Refunded"
    REFUNDED = "refunded", "Refunded"
    VOIDED = "voided", "Voided"


REFUNDABLE_PAYMENT_STATES = frozenset(
    {
        PaymentState.COMPLETED,
        PaymentState.PARTIALLY_REFUNDED,
    }
)
