"""
Choice enums and classification sets for commerce models.
"""

from django.db import models


class OrderState(models.TextChoices):
    """
    Order workflow states.

    State Flow:
        DRAFT → PLACED → COMPLETED → FULFILLED
        DRAFT/PLACED → CANCELED
    """

    DRAFT = "draft", "Draft"
    PLACED = "placed", "Placed"
    COMPLETED = "completed", "Completed"
    FULFILLED = "fulfilled", "Fulfilled"
    CANCELED = "canceled", "Canceled"


class RefundPolicy(models.TextChoices):
    """
    Refund policies an event can advertise.

    REFUND_24H and REFUND_7D are legacy keys kept for events created before
    the day-based names existed. NO_REFUNDS and NONE_SPECIFIED mean the
    same as NONE.
    """

    ONE_DAY = "1_day", "Up to 1 day before the event"
    SEVEN_DAYS = "7_days", "Up to 7 days before the event"
    FOURTEEN_DAYS = "14_days", "Up to 14 days before the event"
    THIRTY_DAYS = "30_days", "Up to 30 days before the event"
    CASE_BY_CASE = "case_by_case", "Case by case"
    NONE = "none", "No refunds"
    REFUND_24H = "refund_24h", "Up to 24 hours before the event (legacy)"
    REFUND_7D = "refund_7d", "Up to 7 days before the event (legacy)"
    NO_REFUNDS = "no_refunds", "No refunds (legacy)"
    NONE_SPECIFIED = "none_specified", "Not specified"


class ItemBundle(models.TextChoices):
    """Line item kinds. Everything except the donation bundles is a ticket."""

    TICKET = "ticket", "Ticket"
    CHECKOUT_DONATION = "checkout_donation", "Checkout donation"
    PLATFORM_DONATION = "platform_donation", "Platform donation"
    RSVP_DONATION = "rsvp_donation", "RSVP donation"


DONATION_BUNDLES = frozenset(
    {
        ItemBundle.CHECKOUT_DONATION,
        ItemBundle.PLATFORM_DONATION,
        ItemBundle.RSVP_DONATION,
    }
)

REFUNDABLE_ORDER_STATES = frozenset(
    {
        OrderState.COMPLETED,
        OrderState.FULFILLED,
        OrderState.PLACED,
    }
)
