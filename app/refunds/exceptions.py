"""
Refund exceptions.

Exception Hierarchy:
    RefundError (mixin marker for all refund failures)
    ├── IneligibleError - Buyer self-service refund not allowed (ValidationError)
    ├── AccessDeniedError - Account may not act as vendor (PermissionDeniedError)
    ├── NotFoundError - Order, event, request or log missing (core NotFoundError)
    ├── InvalidAmountError - Resolved amount is zero or negative (ValidationError)
    └── ExceedsRefundableError - Amount larger than payments can cover (ValidationError)

GatewayError (payments.exceptions) is re-exported here. It is raised by the
gateway for a single payment and never escapes refund execution.

Usage:
    from refunds.exceptions import RefundError

    try:
        orchestrator.request_buyer_refund(order, event, request.user)
    except RefundError as e:
        messages.error(request, e.message)
"""

from __future__ import annotations

from core import exceptions as core_exceptions
from payments.exceptions import GatewayError


class RefundError(core_exceptions.BaseApplicationError):
    """Base class for refund failures surfaced to the caller."""

    default_error_code: str = "REFUND_ERROR"


class IneligibleError(RefundError, core_exceptions.ValidationError):
    """
    Raised when a buyer may not request a refund right now.

    The message is the first failing eligibility check, worded for the
    buyer, and is also available as details["reason"].
    """

    default_error_code: str = "REFUND_INELIGIBLE"

    def __init__(self, reason: str, details: dict | None = None):
        details = {**(details or {}), "reason": reason}
        super().__init__(reason, details=details)
        self.reason = reason


class AccessDeniedError(RefundError, core_exceptions.PermissionDeniedError):
    """Raised when an account may not manage refunds for an order."""

    default_error_code: str = "REFUND_ACCESS_DENIED"


class NotFoundError(RefundError, core_exceptions.NotFoundError):
    """Raised when a referenced order, event, request or log is missing."""

    default_error_code: str = "REFUND_NOT_FOUND"


class InvalidAmountError(RefundError, core_exceptions.ValidationError):
    """Raised when the resolved refund amount is not positive."""

    default_error_code: str = "REFUND_INVALID_AMOUNT"


class ExceedsRefundableError(RefundError, core_exceptions.ValidationError):
    """Raised when the amount is larger than the order's payments can cover."""

    default_error_code: str = "REFUND_EXCEEDS_REFUNDABLE"


__all__ = [
    "RefundError",
    "IneligibleError",
    "AccessDeniedError",
    "NotFoundError",
    "InvalidAmountError",
    "ExceedsRefundableError",
    "GatewayError",
]
