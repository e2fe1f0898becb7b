"""
Pytest fixtures for Stripe adapter tests.

Provides mock Stripe objects so tests never hit the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import stripe


# =============================================================================
# Mock Stripe Objects
# =============================================================================


@dataclass
class MockStripeObject:
    """
    Mock Stripe API object.

    Mimics attribute access and to_dict() of Stripe response objects.
    """

    id: str
    _data: dict[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self._data}


@pytest.fixture
def mock_refund():
    """A successful Stripe Refund response."""
    return MockStripeObject(
        id="re_test_123",
        _data={
            "object": "refund",
            "amount": 7500,
            "currency": "aud",
            "status": "succeeded",
            "payment_intent": "pi_test_123",
            "metadata": {"reference": "12"},
        },
    )


# =============================================================================
# Stripe API Mocks
# =============================================================================


@pytest.fixture
def mock_stripe_refund():
    """Patch stripe.Refund."""
    with patch("stripe.Refund") as mock:
        yield mock


@pytest.fixture
def mock_stripe_http_client():
    """Patch the Stripe HTTP client so configuring the adapter has no side effects."""
    with patch("stripe.RequestsClient") as mock:
        mock.return_value = MagicMock()
        yield mock


# =============================================================================
# Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def stripe_invalid_request_error():
    return stripe.InvalidRequestError(
        message="Charge ch_123 has already been refunded.",
        param="payment_intent",
        code="charge_already_refunded",
    )


@pytest.fixture
def stripe_rate_limit_error():
    return stripe.RateLimitError(message="Too many requests")


@pytest.fixture
def stripe_connection_error():
    return stripe.APIConnectionError(message="Network error")


@pytest.fixture
def stripe_timeout_error():
    return stripe.APIConnectionError(message="Request timed out")


@pytest.fixture
def stripe_api_error():
    return stripe.APIError(message="Internal server error")


@pytest.fixture
def stripe_authentication_error():
    return stripe.AuthenticationError(message="Invalid API Key provided")
