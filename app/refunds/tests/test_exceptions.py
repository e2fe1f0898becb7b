"""
Tests for the refund exception hierarchy.
"""

from core import exceptions as core_exceptions
from refunds.exceptions import (
    AccessDeniedError,
    ExceedsRefundableError,
    IneligibleError,
    InvalidAmountError,
    NotFoundError,
    RefundError,
)


class TestRefundExceptions:
    def test_ineligible_carries_reason(self):
        error = IneligibleError("The refund window for this event has closed.", details={"order_id": 3})

        assert error.reason == "The refund window for this event has closed."
        assert error.message == error.reason
        assert error.details == {"order_id": 3, "reason": error.reason}
        assert error.error_code == "REFUND_INELIGIBLE"

    def test_everything_is_a_refund_error(self):
        for error_class in (
            IneligibleError,
            AccessDeniedError,
            NotFoundError,
            InvalidAmountError,
            ExceedsRefundableError,
        ):
            assert issubclass(error_class, RefundError)

    def test_core_categories(self):
        assert isinstance(AccessDeniedError("no"), core_exceptions.PermissionDeniedError)
        assert isinstance(NotFoundError("gone"), core_exceptions.NotFoundError)
        assert isinstance(InvalidAmountError("zero"), core_exceptions.ValidationError)
        assert isinstance(ExceedsRefundableError("too much"), core_exceptions.ValidationError)

    def test_error_code_wins_over_parent_default(self):
        assert AccessDeniedError("no").error_code == "REFUND_ACCESS_DENIED"
        assert NotFoundError("gone").to_dict()["error_code"] == "REFUND_NOT_FOUND"
