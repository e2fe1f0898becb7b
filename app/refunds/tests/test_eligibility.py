"""
Tests for buyer refund eligibility.
"""

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.contrib.auth.models import AnonymousUser
from freezegun import freeze_time

from authentication.tests.factories import UserFactory
from commerce.states import ItemBundle, OrderState, RefundPolicy
from commerce.tests.factories import EventFactory, OrderFactory, OrderItemFactory
from refunds.services import eligibility
from refunds.services.eligibility import (
    REASON_NO_ITEMS,
    REASON_NO_REFUNDS,
    REASON_NOT_OWNER,
    REASON_ORDER_STATE,
    REASON_WINDOW_CLOSED,
)

EVENT_START = datetime(2026, 3, 20, 19, 0, tzinfo=dt_timezone.utc)


# =============================================================================
# Policy
# =============================================================================


class TestPolicy:
    @pytest.mark.parametrize(
        "policy,days",
        [
            (RefundPolicy.ONE_DAY, 1),
            (RefundPolicy.SEVEN_DAYS, 7),
            (RefundPolicy.FOURTEEN_DAYS, 14),
            (RefundPolicy.THIRTY_DAYS, 30),
            (RefundPolicy.REFUND_24H, 1),
            (RefundPolicy.REFUND_7D, 7),
            (RefundPolicy.CASE_BY_CASE, None),
        ],
    )
    def test_refundable_policies(self, policy, days):
        event = EventFactory.build(refund_policy=policy)

        assert eligibility.policy_allows_refund(event) is True
        assert eligibility.policy_window_days(event) == days

    @pytest.mark.parametrize(
        "policy",
        [RefundPolicy.NONE, RefundPolicy.NO_REFUNDS, RefundPolicy.NONE_SPECIFIED, "", "90_days"],
    )
    def test_non_refundable_policies(self, policy):
        event = EventFactory.build(refund_policy=policy)

        assert eligibility.policy_allows_refund(event) is False
        assert eligibility.policy_window_days(event) is None


class TestWithinRefundWindow:
    """The window closes at starts_at minus the policy's days."""

    def test_open_before_cutoff(self):
        event = EventFactory.build(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=EVENT_START)
        now = EVENT_START - timedelta(days=7, seconds=1)

        assert eligibility.within_refund_window(event, now=now) is True

    def test_closed_exactly_at_cutoff(self):
        event = EventFactory.build(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=EVENT_START)
        now = EVENT_START - timedelta(days=7)

        assert eligibility.within_refund_window(event, now=now) is False

    def test_legacy_24h_policy(self):
        event = EventFactory.build(refund_policy=RefundPolicy.REFUND_24H, starts_at=EVENT_START)

        assert eligibility.within_refund_window(event, now=EVENT_START - timedelta(hours=25)) is True
        assert eligibility.within_refund_window(event, now=EVENT_START - timedelta(hours=23)) is False

    def test_case_by_case_never_closes(self):
        event = EventFactory.build(refund_policy=RefundPolicy.CASE_BY_CASE, starts_at=EVENT_START)

        assert eligibility.within_refund_window(event, now=EVENT_START + timedelta(days=2)) is True

    def test_case_by_case_without_start_is_open(self):
        event = EventFactory.build(refund_policy=RefundPolicy.CASE_BY_CASE, starts_at=None)

        assert eligibility.within_refund_window(event) is True

    def test_missing_start_closes_day_based_window(self):
        event = EventFactory.build(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=None)

        assert eligibility.within_refund_window(event) is False

    @freeze_time("2026-03-10 12:00:00")
    def test_defaults_to_current_time(self):
        event = EventFactory.build(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=EVENT_START)

        assert eligibility.within_refund_window(event) is True

    @freeze_time("2026-03-14 12:00:00")
    def test_defaults_to_current_time_after_cutoff(self):
        event = EventFactory.build(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=EVENT_START)

        assert eligibility.within_refund_window(event) is False


# =============================================================================
# Gate ordering
# =============================================================================


@pytest.mark.django_db
class TestIneligibilityReason:
    """The first failing gate supplies the reason."""

    @pytest.fixture
    def buyer(self):
        return UserFactory()

    @pytest.fixture
    def event(self):
        return EventFactory(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=EVENT_START)

    @pytest.fixture
    def order(self, buyer, event):
        order = OrderFactory(customer=buyer)
        OrderItemFactory(order=order, target_event=event)
        return order

    @freeze_time("2026-03-01 09:00:00")
    def test_eligible(self, order, event, buyer):
        assert eligibility.ineligibility_reason(order, event, buyer) is None
        assert eligibility.is_eligible(order, event, buyer) is True

    def test_other_account_is_not_owner(self, order, event):
        assert eligibility.ineligibility_reason(order, event, UserFactory()) == REASON_NOT_OWNER

    def test_anonymous_is_not_owner(self, order, event):
        assert eligibility.ineligibility_reason(order, event, AnonymousUser()) == REASON_NOT_OWNER
        assert eligibility.ineligibility_reason(order, event, None) == REASON_NOT_OWNER

    def test_guest_order_has_no_owner(self, event, buyer):
        order = OrderFactory(customer=None, email="guest@example.com")
        OrderItemFactory(order=order, target_event=event)

        assert eligibility.ineligibility_reason(order, event, buyer) == REASON_NOT_OWNER

    @pytest.mark.parametrize("state", [OrderState.DRAFT, OrderState.CANCELED])
    def test_order_state(self, order, event, buyer, state):
        order.state = state
        order.save()

        assert eligibility.ineligibility_reason(order, event, buyer) == REASON_ORDER_STATE

    def test_ownership_checked_before_state(self, order, event):
        order.state = OrderState.CANCELED
        order.save()

        assert eligibility.ineligibility_reason(order, event, UserFactory()) == REASON_NOT_OWNER

    def test_no_items_for_event(self, order, buyer):
        other_event = EventFactory(refund_policy=RefundPolicy.SEVEN_DAYS, starts_at=EVENT_START)

        assert eligibility.ineligibility_reason(order, other_event, buyer) == REASON_NO_ITEMS

    def test_donation_item_counts_as_item_presence(self, buyer, event):
        """Presence looks at any item for the event, donations included."""
        order = OrderFactory(customer=buyer)
        OrderItemFactory(order=order, target_event=event, bundle=ItemBundle.CHECKOUT_DONATION)

        with freeze_time("2026-03-01"):
            assert eligibility.ineligibility_reason(order, event, buyer) is None

    def test_policy_disallows(self, order, event, buyer):
        event.refund_policy = RefundPolicy.NO_REFUNDS
        event.save()

        assert eligibility.ineligibility_reason(order, event, buyer) == REASON_NO_REFUNDS

    def test_window_closed(self, order, event, buyer):
        now = EVENT_START - timedelta(days=3)

        assert eligibility.ineligibility_reason(order, event, buyer, now=now) == REASON_WINDOW_CLOSED
        assert eligibility.is_eligible(order, event, buyer, now=now) is False
