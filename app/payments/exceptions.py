"""
Payment-specific exceptions for gateway and concurrency failures.

Exception Hierarchy:
    PaymentError (base for payment domain)
    └── GatewayError - A gateway call failed for one payment
        └── StripeError - Base for all Stripe errors
            ├── StripeInvalidRequestError - Invalid request params (permanent)
            ├── StripeRateLimitError - Rate limited (transient, retry)
            ├── StripeAPIUnavailableError - API unavailable (transient, retry)
            └── StripeTimeoutError - Request timeout (transient, retry)
    LockAcquisitionError - Distributed lock contention (inherits ConflictError)

Usage:
    from payments.exceptions import GatewayError, LockAcquisitionError

    try:
        gateway.refund(payment, 7500, reference="log:12")
    except GatewayError as e:
        logger.warning(f"Refund against payment failed: {e}")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class GatewayError(PaymentError):
    """
    Raised when a payment gateway call fails for a single payment.

    The refund engine treats this as a per-payment failure: it is logged
    and the next candidate payment is tried.

    Attributes:
        is_retryable: Whether the same call may succeed later
    """

    default_error_code: str = "GATEWAY_ERROR"
    is_retryable: bool = False


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(GatewayError):
    """
    Base exception for all Stripe-related errors.

    Provides common attributes for Stripe error handling:
    - stripe_code: Stripe's internal error code
    - is_retryable: Whether the operation can be retried
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code


# -----------------------------------------------------------------------------
# Permanent Errors (do not retry)
# -----------------------------------------------------------------------------


class StripeInvalidRequestError(StripeError):
    """
    Invalid request parameters sent to Stripe.

    Possible causes for refunds:
    - Unknown PaymentIntent ID
    - Amount larger than what is left on the charge
    - Charge already fully refunded
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"
    is_retryable: bool = False


# -----------------------------------------------------------------------------
# Transient Errors (safe to retry with backoff)
# -----------------------------------------------------------------------------


class StripeRateLimitError(StripeError):
    """Rate limited by Stripe API."""

    default_error_code: str = "STRIPE_RATE_LIMITED"
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """Stripe API is unreachable or returned a server error."""

    default_error_code: str = "STRIPE_UNAVAILABLE"
    is_retryable: bool = True


class StripeTimeoutError(StripeError):
    """Stripe request exceeded STRIPE_API_TIMEOUT_SECONDS."""

    default_error_code: str = "STRIPE_TIMEOUT"
    is_retryable: bool = True


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class LockAcquisitionError(ConflictError):
    """
    Raised when a distributed lock cannot be acquired.

    Another process holds the lock and it couldn't be acquired within the
    timeout period (or at all, for non-blocking locks).

    Example:
        raise LockAcquisitionError(
            "Failed to acquire lock 'lock:refund:order:42' within 10.0s",
            details={"key": "lock:refund:order:42", "timeout": 10.0},
        )
    """

    default_error_code: str = "LOCK_ACQUISITION_FAILED"


__all__ = [
    "PaymentError",
    "GatewayError",
    "StripeError",
    "StripeInvalidRequestError",
    "StripeRateLimitError",
    "StripeAPIUnavailableError",
    "StripeTimeoutError",
    "LockAcquisitionError",
]
