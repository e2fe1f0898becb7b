"""
Tests for vendor refund access checks.
"""

import pytest
from django.contrib.auth.models import AnonymousUser, Permission

from authentication.tests.factories import UserFactory
from commerce.ownership import StoreOwnershipResolver
from commerce.states import OrderState
from commerce.tests.factories import EventFactory, OrderFactory, OrderItemFactory, StoreFactory
from refunds.services.access import RefundAccessResolver


@pytest.fixture
def access():
    return RefundAccessResolver(StoreOwnershipResolver())


def grant_admin(user):
    user.user_permissions.add(Permission.objects.get(codename="administer_refunds"))
    # Drop the cached permission set
    return type(user).objects.get(pk=user.pk)


@pytest.mark.django_db
class TestPlatformAdmin:
    def test_superuser_is_admin(self, access):
        assert access.is_platform_admin(UserFactory(is_superuser=True, is_staff=True)) is True

    def test_permission_grants_admin(self, access):
        assert access.is_platform_admin(grant_admin(UserFactory())) is True

    def test_regular_account_is_not_admin(self, access):
        assert access.is_platform_admin(UserFactory()) is False

    def test_anonymous_is_not_admin(self, access):
        assert access.is_platform_admin(AnonymousUser()) is False
        assert access.is_platform_admin(None) is False


@pytest.mark.django_db
class TestVendorCanManageEvent:
    def test_event_owner(self, access):
        event = EventFactory()

        assert access.vendor_can_manage_event(event, event.owner) is True

    def test_store_owner(self, access):
        store = StoreFactory()
        event = EventFactory(store=store)

        assert access.vendor_can_manage_event(event, store.owner) is True

    def test_owner_of_other_store(self, access):
        event = EventFactory(store=StoreFactory())
        other = StoreFactory()

        assert access.vendor_can_manage_event(event, other.owner) is False

    def test_admin_manages_any_event(self, access):
        assert access.vendor_can_manage_event(EventFactory(), grant_admin(UserFactory())) is True

    def test_stranger(self, access):
        assert access.vendor_can_manage_event(EventFactory(), UserFactory()) is False

    def test_anonymous(self, access):
        assert access.vendor_can_manage_event(EventFactory(), AnonymousUser()) is False


@pytest.mark.django_db
class TestVendorCanRefundOrder:
    @pytest.fixture
    def event(self):
        return EventFactory()

    @pytest.fixture
    def order(self, event):
        order = OrderFactory()
        OrderItemFactory(order=order, target_event=event)
        return order

    def test_owner_can_refund(self, access, order, event):
        assert access.vendor_can_refund_order(order, event, event.owner) is True

    def test_order_without_items_for_event(self, access, event):
        order = OrderFactory()
        OrderItemFactory(order=order)

        assert access.vendor_can_refund_order(order, event, event.owner) is False

    @pytest.mark.parametrize("state", [OrderState.DRAFT, OrderState.CANCELED])
    def test_non_refundable_order(self, access, order, event, state):
        order.state = state
        order.save()

        assert access.vendor_can_refund_order(order, event, event.owner) is False

    def test_stranger_cannot_refund(self, access, order, event):
        assert access.vendor_can_refund_order(order, event, UserFactory()) is False
