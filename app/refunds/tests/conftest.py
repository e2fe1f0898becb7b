"""
Pytest fixtures for refunds tests.

The orchestrator is built with in-memory fakes for the gateway, queue and
notifier. Store ownership uses the real database-backed resolver.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from authentication.tests.factories import UserFactory
from commerce.ownership import StoreOwnershipResolver
from commerce.states import ItemBundle
from commerce.tests.factories import EventFactory, OrderFactory, OrderItemFactory
from payments.exceptions import GatewayError
from payments.tests.factories import PaymentFactory
from refunds.services.orchestrator import RefundOrchestrator


# =============================================================================
# Fakes
# =============================================================================


class FakeGateway:
    """
    Records refund calls.

    Payments listed in ``failures`` raise the mapped exception instead of
    refunding.
    """

    def __init__(self):
        self.calls = []
        self.failures = {}

    def refund(self, payment, amount_cents, reference=None):
        self.calls.append((payment.pk, amount_cents, reference))
        error = self.failures.get(payment.pk)
        if error is not None:
            raise error
        return f"re_fake_{len(self.calls)}"


class FakeQueue:
    def __init__(self):
        self.jobs = []

    def enqueue(self, queue_name, payload):
        self.jobs.append((queue_name, payload))


class FakeNotifier:
    """Collects sent notifications; set ``fail`` to make every send raise."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, template_key, recipient, context):
        if self.fail:
            raise RuntimeError("mail server down")
        self.sent.append((template_key, recipient, context))

    def keys(self):
        return [key for key, _, _ in self.sent]

    def recipients(self, template_key):
        return [recipient for key, recipient, _ in self.sent if key == template_key]


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture(autouse=True)
def mock_redis():
    """Every DistributedLock acquires and releases against a mock Redis."""
    redis = MagicMock()
    redis.set.return_value = True
    redis.eval.return_value = 1
    with patch("payments.locks.get_redis_connection", return_value=redis):
        yield redis


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def queue():
    return FakeQueue()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def orchestrator(gateway, queue, notifier):
    return RefundOrchestrator(
        gateway=gateway,
        queue=queue,
        notifier=notifier,
        store_resolver=StoreOwnershipResolver(),
    )


@pytest.fixture
def gateway_error():
    return GatewayError("Card issuer declined the refund")


# =============================================================================
# Domain Data
# =============================================================================


@pytest.fixture
def vendor(db):
    return UserFactory(email="vendor@example.com")


@pytest.fixture
def buyer(db):
    return UserFactory(email="buyer@example.com")


@pytest.fixture
def event(vendor):
    """Event 60 days out with a 7-day refund window."""
    return EventFactory(owner=vendor, title="Harbour Lights", venue_name="Pier 4")


@pytest.fixture
def order(buyer, event):
    """
    Completed order with A$75 of tickets (3 x A$25) and a A$10 donation.
    """
    order = OrderFactory(customer=buyer, order_number="ORD-5001")
    OrderItemFactory(order=order, target_event=event, quantity=3, total_amount=Decimal("75.00"))
    OrderItemFactory(
        order=order,
        target_event=event,
        bundle=ItemBundle.CHECKOUT_DONATION,
        total_amount=Decimal("10.00"),
    )
    return order


@pytest.fixture
def payment(order):
    """A$85 payment covering the whole order."""
    return PaymentFactory(order=order, amount=Decimal("85.00"))
