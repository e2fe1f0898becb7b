"""
Tests for StripeAdapter and its helpers.
"""

import pytest

from payments.adapters.stripe_adapter import (
    IdempotencyKeyGenerator,
    RefundResult,
    StripeAdapter,
    is_retryable_stripe_error,
)
from payments.exceptions import (
    GatewayError,
    StripeAPIUnavailableError,
    StripeInvalidRequestError,
    StripeRateLimitError,
    StripeTimeoutError,
)


# =============================================================================
# IdempotencyKeyGenerator
# =============================================================================


class TestIdempotencyKeyGenerator:
    def test_key_format(self):
        key = IdempotencyKeyGenerator.generate("refund", "42:12")

        operation, payment_id, log_id, attempt, short_hash = key.split(":")
        assert (operation, payment_id, log_id, attempt) == ("refund", "42", "12", "1")
        assert len(short_hash) == 8

    def test_same_inputs_give_same_key(self):
        """Retrying the same refund yields the same key."""
        first = IdempotencyKeyGenerator.generate("refund", "42:12")
        second = IdempotencyKeyGenerator.generate("refund", "42:12")

        assert first == second

    def test_different_entity_or_attempt_changes_key(self):
        base = IdempotencyKeyGenerator.generate("refund", "42:12")

        assert IdempotencyKeyGenerator.generate("refund", "42:13") != base
        assert IdempotencyKeyGenerator.generate("refund", "42:12", attempt=2) != base


class TestIsRetryableStripeError:
    @pytest.mark.parametrize(
        "error_class,expected",
        [
            (StripeRateLimitError, True),
            (StripeAPIUnavailableError, True),
            (StripeTimeoutError, True),
            (StripeInvalidRequestError, False),
        ],
    )
    def test_stripe_errors(self, error_class, expected):
        assert is_retryable_stripe_error(error_class("boom")) is expected

    def test_other_errors_are_not_retryable(self):
        assert is_retryable_stripe_error(ValueError("boom")) is False
        assert is_retryable_stripe_error(GatewayError("boom")) is False


# =============================================================================
# create_refund
# =============================================================================


class TestStripeAdapterCreateRefund:
    """Tests for StripeAdapter.create_refund."""

    @pytest.fixture(autouse=True)
    def setup_mocks(self, mock_stripe_http_client):
        self.mock_http_client = mock_stripe_http_client

    def test_success_returns_refund_result(self, mock_stripe_refund, mock_refund):
        mock_stripe_refund.create.return_value = mock_refund

        result = StripeAdapter.create_refund(
            payment_intent_id="pi_test_123",
            idempotency_key="refund:42:12:1:abcdef12",
            amount_cents=7500,
            reason="requested_by_customer",
            metadata={"reference": "12"},
        )

        assert isinstance(result, RefundResult)
        assert result.id == "re_test_123"
        assert result.amount_cents == 7500
        assert result.status == "succeeded"
        assert result.payment_intent_id == "pi_test_123"
        assert result.metadata == {"reference": "12"}
        assert result.raw_response["id"] == "re_test_123"

    def test_passes_params_to_stripe(self, mock_stripe_refund, mock_refund):
        mock_stripe_refund.create.return_value = mock_refund

        StripeAdapter.create_refund(
            payment_intent_id="pi_test_123",
            idempotency_key="refund:42:12:1:abcdef12",
            amount_cents=7500,
            reason="requested_by_customer",
        )

        call_kwargs = mock_stripe_refund.create.call_args.kwargs
        assert call_kwargs["payment_intent"] == "pi_test_123"
        assert call_kwargs["amount"] == 7500
        assert call_kwargs["reason"] == "requested_by_customer"
        assert call_kwargs["idempotency_key"] == "refund:42:12:1:abcdef12"
        assert call_kwargs["metadata"] == {}

    def test_full_refund_omits_amount(self, mock_stripe_refund, mock_refund):
        mock_stripe_refund.create.return_value = mock_refund

        StripeAdapter.create_refund(
            payment_intent_id="pi_test_123",
            idempotency_key="refund:42:1:abcdef12",
        )

        call_kwargs = mock_stripe_refund.create.call_args.kwargs
        assert "amount" not in call_kwargs
        assert "reason" not in call_kwargs

    def test_configures_timeout(self, mock_stripe_refund, mock_refund, settings):
        settings.STRIPE_API_TIMEOUT_SECONDS = 7
        mock_stripe_refund.create.return_value = mock_refund

        StripeAdapter.create_refund(
            payment_intent_id="pi_test_123",
            idempotency_key="refund:42:1:abcdef12",
        )

        self.mock_http_client.assert_called_once_with(timeout=7)


# =============================================================================
# Error translation
# =============================================================================


class TestStripeAdapterErrors:
    """Stripe SDK errors are translated into domain exceptions."""

    @pytest.fixture(autouse=True)
    def setup_mocks(self, mock_stripe_http_client):
        self.mock_http_client = mock_stripe_http_client

    def _create(self):
        return StripeAdapter.create_refund(
            payment_intent_id="pi_test_123",
            idempotency_key="refund:42:12:1:abcdef12",
            amount_cents=100,
        )

    def test_invalid_request(self, mock_stripe_refund, stripe_invalid_request_error):
        mock_stripe_refund.create.side_effect = stripe_invalid_request_error

        with pytest.raises(StripeInvalidRequestError) as exc_info:
            self._create()

        assert exc_info.value.stripe_code == "charge_already_refunded"
        assert exc_info.value.is_retryable is False
        assert exc_info.value.__cause__ is stripe_invalid_request_error

    def test_rate_limit(self, mock_stripe_refund, stripe_rate_limit_error):
        mock_stripe_refund.create.side_effect = stripe_rate_limit_error

        with pytest.raises(StripeRateLimitError) as exc_info:
            self._create()

        assert exc_info.value.is_retryable is True

    def test_connection_error(self, mock_stripe_refund, stripe_connection_error):
        mock_stripe_refund.create.side_effect = stripe_connection_error

        with pytest.raises(StripeAPIUnavailableError) as exc_info:
            self._create()

        assert exc_info.value.stripe_code == "api_connection_error"

    def test_timeout(self, mock_stripe_refund, stripe_timeout_error):
        mock_stripe_refund.create.side_effect = stripe_timeout_error

        with pytest.raises(StripeTimeoutError):
            self._create()

    def test_authentication_error_is_permanent(
        self, mock_stripe_refund, stripe_authentication_error
    ):
        mock_stripe_refund.create.side_effect = stripe_authentication_error

        with pytest.raises(StripeInvalidRequestError) as exc_info:
            self._create()

        assert exc_info.value.stripe_code == "authentication_error"

    def test_api_error(self, mock_stripe_refund, stripe_api_error):
        mock_stripe_refund.create.side_effect = stripe_api_error

        with pytest.raises(StripeAPIUnavailableError) as exc_info:
            self._create()

        assert exc_info.value.stripe_code == "api_error"

    def test_unexpected_error(self, mock_stripe_refund):
        mock_stripe_refund.create.side_effect = KeyError("amount")

        with pytest.raises(StripeAPIUnavailableError) as exc_info:
            self._create()

        assert exc_info.value.stripe_code == "unknown_error"

    def test_all_translations_are_gateway_errors(
        self, mock_stripe_refund, stripe_rate_limit_error
    ):
        """The refund engine only needs to catch GatewayError."""
        mock_stripe_refund.create.side_effect = stripe_rate_limit_error

        with pytest.raises(GatewayError):
            self._create()
