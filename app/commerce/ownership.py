"""
Store ownership lookups used by the refund access checks.
"""

from __future__ import annotations

from commerce.models import Event, Store


class StoreOwnershipResolver:
    """
    Resolves which store an account acts for.

    An account acts for the first store it owns (by id). Anonymous
    accounts act for no store.
    """

    def store_for_account(self, account) -> Store | None:
        if account is None or not getattr(account, "is_authenticated", False):
            return None
        return Store.objects.filter(owner_id=account.pk).order_by("id").first()

    def store_owns_event(self, store: Store | None, event: Event) -> bool:
        if store is None or event.store_id is None:
            return False
        return event.store_id == store.pk
