"""
Buyer self-service refund eligibility.

Five gates, evaluated in this order; the first one that fails supplies
the reason shown to the buyer:

1. Ownership    - the account is signed in and placed the order
2. Order state  - the order is placed, completed or fulfilled
3. Item presence - the order has at least one item for the event
4. Policy       - the event's refund policy allows refunds at all
5. Window       - for day-based policies, now is before start - N days

Usage:
    from refunds.services.eligibility import is_eligible, ineligibility_reason

    if not is_eligible(order, event, request.user):
        messages.error(request, ineligibility_reason(order, event, request.user))
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from django.utils import timezone

from commerce.states import REFUNDABLE_ORDER_STATES
from refunds.services.money import items_for_event

if TYPE_CHECKING:
    from commerce.models import Event, Order

REASON_NOT_OWNER = "You do not own this order."
REASON_ORDER_STATE = "This order is not in a refundable state."
REASON_NO_ITEMS = "This order does not contain tickets for this event."
REASON_NO_REFUNDS = "This event does not allow refunds."
REASON_WINDOW_CLOSED = "The refund window for this event has closed."

# Policy key -> refund window in days; None means no fixed window.
POLICY_DAYS: dict[str, int | None] = {
    "1_day": 1,
    "7_days": 7,
    "14_days": 14,
    "30_days": 30,
    "refund_24h": 1,
    "refund_7d": 7,
    "case_by_case": None,
}


def _policy_key(event: Event) -> str:
    return (event.refund_policy or "").strip()


def policy_allows_refund(event: Event) -> bool:
    """True for recognized policies; "none", "no_refunds", blank or unknown are False."""
    return _policy_key(event) in POLICY_DAYS


def policy_window_days(event: Event) -> int | None:
    """Window length in days, or None for case-by-case and non-refundable policies."""
    return POLICY_DAYS.get(_policy_key(event))


def buyer_owns_order(order: Order, account: Any) -> bool:
    if account is None or not getattr(account, "is_authenticated", False):
        return False
    return order.customer_id is not None and order.customer_id == account.pk


def order_is_refundable(order: Order) -> bool:
    return order.state in REFUNDABLE_ORDER_STATES


def within_refund_window(event: Event, now: datetime | None = None) -> bool:
    """
    Check the time gate.

    Case-by-case never closes. Day-based policies close at
    ``starts_at - days``; an event without a start time is closed.
    """
    if not policy_allows_refund(event):
        return False
    days = policy_window_days(event)
    if days is None:
        return True
    if event.starts_at is None:
        return False
    now = now or timezone.now()
    return now < event.starts_at - timedelta(days=days)


def ineligibility_reason(
    order: Order,
    event: Event,
    account: Any,
    now: datetime | None = None,
) -> str | None:
    """Return the first failing gate's reason, or None when eligible."""
    if not buyer_owns_order(order, account):
        return REASON_NOT_OWNER
    if not order_is_refundable(order):
        return REASON_ORDER_STATE
    if not items_for_event(order, event):
        return REASON_NO_ITEMS
    if not policy_allows_refund(event):
        return REASON_NO_REFUNDS
    if not within_refund_window(event, now=now):
        return REASON_WINDOW_CLOSED
    return None


def is_eligible(order: Order, event: Event, account: Any, now: datetime | None = None) -> bool:
    return ineligibility_reason(order, event, account, now=now) is None
