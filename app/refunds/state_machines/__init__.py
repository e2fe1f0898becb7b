"""
State and choice enums for refund models.
"""

from refunds.state_machines.states import (
    RefundLogStatus,
    RefundRequestStatus,
    RefundScope,
    RefundType,
)

__all__ = [
    "RefundLogStatus",
    "RefundRequestStatus",
    "RefundScope",
    "RefundType",
]
