"""
End-to-end refund journeys through the production wiring.

Celery runs eagerly, emails go to Django's test outbox and Stripe is
mocked at the SDK boundary. Everything in between is real.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from django.core import mail

from payments.state_machines import PaymentState
from refunds.adapters import CeleryJobQueue, get_refund_orchestrator
from refunds.models import RefundLog, RefundRequest
from refunds.state_machines import RefundLogStatus, RefundRequestStatus
from refunds.tests.factories import paid_order


@pytest.fixture
def stripe_refund():
    """Patch stripe.Refund.create to accept every refund."""
    refund = MagicMock(
        id="re_e2e_1",
        amount=7500,
        currency="aud",
        status="succeeded",
        payment_intent="pi_e2e",
        metadata={},
    )
    refund.to_dict.return_value = {"id": "re_e2e_1"}
    with patch("stripe.RequestsClient"), patch("stripe.Refund") as mock_refund:
        mock_refund.create.return_value = refund
        yield mock_refund


@pytest.mark.django_db
class TestBuyerRefundJourney:
    def test_request_approve_and_execute(self, stripe_refund, order, event, buyer, vendor, payment):
        """A buyer request approved by the vendor ends with money back and four parties informed."""
        orchestrator = get_refund_orchestrator()

        request_id = orchestrator.request_buyer_refund(order, event, buyer)
        log_id = orchestrator.approve_buyer_refund_request(request_id, vendor)

        log = RefundLog.objects.get(pk=log_id)
        assert log.status == RefundLogStatus.COMPLETED
        assert log.gateway_refund_id == "re_e2e_1"
        assert log.payment_id == payment.pk

        assert RefundRequest.objects.get(pk=request_id).status == RefundRequestStatus.COMPLETED

        payment.refresh_from_db()
        assert payment.refunded_amount == Decimal("75.00")
        assert payment.state == PaymentState.PARTIALLY_REFUNDED

        call_kwargs = stripe_refund.create.call_args.kwargs
        assert call_kwargs["amount"] == 7500
        assert call_kwargs["payment_intent"] == payment.remote_id

        # Eager Celery executes the refund before approval emails go out
        subjects = [m.subject for m in mail.outbox]
        assert subjects == [
            "Refund request received for Harbour Lights",
            "New refund request for Harbour Lights",
            "Your refund for Harbour Lights has been processed",
            "Refund processed for order ORD-5001",
            "Refund approved for Harbour Lights",
            "Refund approved for Harbour Lights",
        ]
        assert mail.outbox[2].to == ["buyer@example.com"]
        assert mail.outbox[3].to == ["vendor@example.com"]

    def test_rejection_sends_no_money(self, stripe_refund, order, event, buyer, vendor, payment):
        orchestrator = get_refund_orchestrator()

        request_id = orchestrator.request_buyer_refund(order, event, buyer)
        orchestrator.reject_buyer_refund_request(request_id, vendor, "Tickets were transferred")

        stripe_refund.create.assert_not_called()
        assert "Reason: Tickets were transferred" in mail.outbox[-1].body


@pytest.mark.django_db
class TestEventCancellationJourney:
    def test_cancellation_refunds_every_order(self, stripe_refund, event, vendor, settings):
        settings.REFUNDS_CANCELLATION_BATCH_SIZE = 2
        orders = [paid_order(event) for _ in range(3)]

        CeleryJobQueue().enqueue(
            settings.REFUNDS_CANCELLATION_QUEUE,
            {"event_id": event.pk, "vendor_id": vendor.pk, "after_order_id": None},
        )

        logs = RefundLog.objects.filter(order__in=orders)
        assert logs.count() == 3
        assert set(logs.values_list("status", flat=True)) == {RefundLogStatus.COMPLETED}
        assert stripe_refund.create.call_count == 3
        assert len(mail.outbox) == 3
