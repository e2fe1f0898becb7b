"""
Integer-cents money inspection for orders and payments.

Every amount leaves this module as an int number of cents. Values are
converted through Decimal, never through binary floating point.

Usage:
    from refunds.services import money

    money.ticket_subtotal_cents(order, event)   # 7500
    money.donation_total_cents(order)           # 1000
    money.refundable_amount_cents(order)        # 8500
    money.format_cents(7500, "aud")             # "AUD 75.00"
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from commerce.states import DONATION_BUNDLES
from payments.state_machines import REFUNDABLE_PAYMENT_STATES

if TYPE_CHECKING:
    from commerce.models import Order, OrderItem
    from payments.models import Payment


def to_cents(value: Any) -> int:
    """
    Convert a money amount to integer cents, rounding to the nearest cent.

    Halves round away from zero: "40.125" -> 4013, "-1.005" -> -101,
    None -> 0.
    """
    if value is None:
        return 0
    text = str(value).strip()
    if not text:
        return 0
    amount = value if isinstance(value, Decimal) else Decimal(text)
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(cents: int, currency: str) -> str:
    """Format cents for people: format_cents(7500, "aud") -> "AUD 75.00"."""
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{currency.upper()} {sign}{cents // 100}.{cents % 100:02d}"


def _event_id(event: Any) -> Any:
    return getattr(event, "pk", event)


# =============================================================================
# Item Classification
# =============================================================================


def is_donation_item(item: OrderItem) -> bool:
    return (item.bundle or "") in DONATION_BUNDLES


def is_ticket_item(item: OrderItem) -> bool:
    """Anything that is not a donation bundle counts as a ticket."""
    return not is_donation_item(item)


def items_for_event(order: Order, event: Any) -> list[OrderItem]:
    """Items of ``order`` targeting ``event`` (an Event or its id)."""
    event_id = _event_id(event)
    return [item for item in order.items.all() if item.target_event_id == event_id]


def ticket_quantity_for_event(order: Order, event: Any) -> int:
    return sum(item.quantity for item in items_for_event(order, event) if is_ticket_item(item))


# =============================================================================
# Subtotals
# =============================================================================


def ticket_subtotal_cents(order: Order, event: Any) -> int:
    """Sum of ticket items targeting ``event``; donations and other events add nothing."""
    return sum(
        to_cents(item.total_amount)
        for item in items_for_event(order, event)
        if is_ticket_item(item)
    )


def donation_total_cents(order: Order) -> int:
    """Sum of every donation item on the order, whatever event it targets."""
    return sum(to_cents(item.total_amount) for item in order.items.all() if is_donation_item(item))


def payment_available_cents(payment: Payment) -> int:
    """Unrefunded remainder of one payment, floored at zero."""
    return max(0, to_cents(payment.amount) - to_cents(payment.refunded_amount))


def refundable_payments(order: Order) -> list[Payment]:
    """Payments in a state that can still be refunded, in stored order."""
    return [p for p in order.payments.order_by("id") if p.state in REFUNDABLE_PAYMENT_STATES]


def refundable_amount_cents(order: Order) -> int:
    """Money still available to refund across the order's eligible payments."""
    return sum(payment_available_cents(p) for p in refundable_payments(order))


# =============================================================================
# Display
# =============================================================================


def mask_email(email: str) -> str:
    """
    Mask the local part of an address for vendor-facing lists.

    "user@example.com" -> "u***@example.com"; invalid input -> "".
    """
    if not email:
        return ""
    try:
        validate_email(email)
    except DjangoValidationError:
        return ""

    local, domain = email.split("@", 1)
    if len(local) > 1:
        masked = local[0] + "*" * min(3, len(local) - 1)
    else:
        masked = "*"
    return f"{masked}@{domain}"
