"""
Payment adapters for external services.

All Stripe API calls go through StripeAdapter to get consistent error
translation, timeouts, idempotency and logging. StripeRefundGateway is
the refund engine's gateway client built on top of it.

Usage:
    from payments.adapters import StripeRefundGateway

    refund_id = StripeRefundGateway().refund(payment, 7500, reference="log:12")
"""

from payments.adapters.gateway import StripeRefundGateway
from payments.adapters.stripe_adapter import (
    IdempotencyKeyGenerator,
    RefundResult,
    StripeAdapter,
    is_retryable_stripe_error,
)

__all__ = [
    "IdempotencyKeyGenerator",
    "RefundResult",
    "StripeAdapter",
    "StripeRefundGateway",
    "is_retryable_stripe_error",
]
