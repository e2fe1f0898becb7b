"""
Vendor access checks for refund management.

An account manages an event's refunds when it is a platform administrator,
owns the event, or owns the store the event is sold under. Refunding a
specific order additionally needs the order to contain items for the event
and to be in a refundable state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from refunds.services.eligibility import order_is_refundable
from refunds.services.money import items_for_event

if TYPE_CHECKING:
    from commerce.models import Event, Order
    from refunds.protocols import StoreResolver

ADMIN_PERMISSION = "commerce.administer_refunds"


class RefundAccessResolver:
    """
    Decides whether an account may act as the vendor for refunds.

    Args:
        store_resolver: Resolves the account's store and whether it owns
            the event
    """

    def __init__(self, store_resolver: StoreResolver):
        self.store_resolver = store_resolver

    def is_platform_admin(self, account: Any) -> bool:
        if account is None or not getattr(account, "is_authenticated", False):
            return False
        return account.has_perm(ADMIN_PERMISSION)

    def vendor_can_manage_event(self, event: Event, account: Any) -> bool:
        if account is None or not getattr(account, "is_authenticated", False):
            return False
        if self.is_platform_admin(account):
            return True
        if event.owner_id is not None and event.owner_id == account.pk:
            return True

        store = self.store_resolver.store_for_account(account)
        return store is not None and self.store_resolver.store_owns_event(store, event)

    def vendor_can_refund_order(self, order: Order, event: Event, account: Any) -> bool:
        if not self.vendor_can_manage_event(event, account):
            return False
        if not items_for_event(order, event):
            return False
        return order_is_refundable(order)
