"""
Vendor-facing overview of an event's refundable orders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from commerce.models import Order
from commerce.ownership import StoreOwnershipResolver
from commerce.states import REFUNDABLE_ORDER_STATES
from refunds.exceptions import AccessDeniedError
from refunds.services import money
from refunds.services.access import RefundAccessResolver

if TYPE_CHECKING:
    from commerce.models import Event


@dataclass(frozen=True)
class VendorOrderSummary:
    order_id: int
    order_number: str
    customer_email: str
    ticket_quantity: int
    ticket_subtotal_cents: int
    refundable_cents: int
    state: str


def orders_for_event(
    event: Event,
    vendor: Any,
    access: RefundAccessResolver | None = None,
) -> list[VendorOrderSummary]:
    """
    Summaries of refundable-state orders holding items for ``event``.

    Customer emails are masked. Newest orders first.

    Raises:
        AccessDeniedError: The vendor cannot manage the event
    """
    access = access or RefundAccessResolver(StoreOwnershipResolver())
    if not access.vendor_can_manage_event(event, vendor):
        raise AccessDeniedError(
            "You do not have permission to view orders for this event.",
            details={"event_id": event.pk},
        )

    orders = (
        Order.objects.filter(items__target_event_id=event.pk, state__in=REFUNDABLE_ORDER_STATES)
        .select_related("customer")
        .prefetch_related("items")
        .distinct()
        .order_by("-id")
    )

    return [
        VendorOrderSummary(
            order_id=order.pk,
            order_number=str(order),
            customer_email=money.mask_email(order.contact_email),
            ticket_quantity=money.ticket_quantity_for_event(order, event),
            ticket_subtotal_cents=money.ticket_subtotal_cents(order, event),
            refundable_cents=money.refundable_amount_cents(order),
            state=order.state,
        )
        for order in orders
    ]
