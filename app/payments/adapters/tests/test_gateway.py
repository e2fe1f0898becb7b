"""
Tests for StripeRefundGateway.
"""

from decimal import Decimal

import pytest
from django_fsm import TransitionNotAllowed

from payments.adapters.gateway import StripeRefundGateway
from payments.exceptions import GatewayError, StripeInvalidRequestError
from payments.state_machines import PaymentState
from payments.tests.factories import PaymentFactory


@pytest.mark.django_db
class TestStripeRefundGateway:
    """Tests for StripeRefundGateway.refund."""

    @pytest.fixture(autouse=True)
    def setup_mocks(self, mock_stripe_http_client, mock_stripe_refund, mock_refund):
        self.mock_stripe_refund = mock_stripe_refund
        self.mock_stripe_refund.create.return_value = mock_refund
        self.gateway = StripeRefundGateway()

    def test_refund_records_amount_on_payment(self):
        """A successful refund is written back to the payment row."""
        payment = PaymentFactory(amount=Decimal("100.00"))

        refund_id = self.gateway.refund(payment, 7500, reference="12")

        assert refund_id == "re_test_123"
        payment.refresh_from_db()
        assert payment.refunded_amount == Decimal("75.00")
        assert payment.state == PaymentState.PARTIALLY_REFUNDED

    def test_refund_of_whole_payment_marks_refunded(self):
        payment = PaymentFactory(amount=Decimal("75.00"))

        self.gateway.refund(payment, 7500, reference="12")

        payment.refresh_from_db()
        assert payment.state == PaymentState.REFUNDED

    def test_sends_payment_intent_and_amount(self):
        payment = PaymentFactory(remote_id="pi_abc")

        self.gateway.refund(payment, 2500, reference="12")

        call_kwargs = self.mock_stripe_refund.create.call_args.kwargs
        assert call_kwargs["payment_intent"] == "pi_abc"
        assert call_kwargs["amount"] == 2500
        assert call_kwargs["reason"] == "requested_by_customer"
        assert call_kwargs["metadata"]["reference"] == "12"
        assert call_kwargs["metadata"]["order_id"] == str(payment.order_id)

    def test_idempotency_key_includes_payment_and_reference(self):
        """The same payment and refund log always reuse one idempotency key."""
        payment = PaymentFactory()

        self.gateway.refund(payment, 1000, reference="12")
        first_key = self.mock_stripe_refund.create.call_args.kwargs["idempotency_key"]
        assert first_key.startswith(f"refund:{payment.pk}:12:1:")

        payment.refresh_from_db()
        self.gateway.refund(payment, 1000, reference="12")
        second_key = self.mock_stripe_refund.create.call_args.kwargs["idempotency_key"]
        assert first_key == second_key

    def test_payment_without_remote_id_is_rejected(self):
        payment = PaymentFactory(remote_id="")

        with pytest.raises(GatewayError) as exc_info:
            self.gateway.refund(payment, 1000, reference="12")

        assert exc_info.value.error_code == "PAYMENT_NOT_REFUNDABLE"
        self.mock_stripe_refund.create.assert_not_called()

    def test_non_stripe_payment_is_rejected(self):
        payment = PaymentFactory(gateway="paypal")

        with pytest.raises(GatewayError):
            self.gateway.refund(payment, 1000, reference="12")

        self.mock_stripe_refund.create.assert_not_called()

    def test_stripe_failure_leaves_payment_untouched(self, stripe_invalid_request_error):
        """When Stripe rejects the refund nothing is recorded."""
        self.mock_stripe_refund.create.side_effect = stripe_invalid_request_error
        payment = PaymentFactory(amount=Decimal("100.00"))

        with pytest.raises(StripeInvalidRequestError):
            self.gateway.refund(payment, 1000, reference="12")

        payment.refresh_from_db()
        assert payment.refunded_amount == Decimal("0.00")
        assert payment.state == PaymentState.COMPLETED

    def test_local_write_failure_still_returns_refund_id(self, mocker):
        """Once Stripe has refunded, a failed payment update is logged, not raised."""
        payment = PaymentFactory(amount=Decimal("100.00"))
        mocker.patch(
            "payments.models.Payment.record_refund",
            side_effect=TransitionNotAllowed("Can't switch from state 'refunded'"),
        )
        mock_logger = mocker.patch("payments.adapters.gateway.logger")

        refund_id = self.gateway.refund(payment, 1000, reference="12")

        assert refund_id == "re_test_123"
        self.mock_stripe_refund.create.assert_called_once()
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["exc_info"] is True
        assert mock_logger.error.call_args.kwargs["extra"]["refund_id"] == "re_test_123"
        payment.refresh_from_db()
        assert payment.refunded_amount == Decimal("0.00")
