"""
Refund models.

- RefundRequest: a buyer's ask, awaiting or carrying a vendor decision
- RefundLog: the audit record of one refund execution attempt

Both tables are append-mostly and retained indefinitely as an audit trail.
"""

from refunds.models.refund_log import RefundLog
from refunds.models.refund_request import RefundRequest

__all__ = [
    "RefundLog",
    "RefundRequest",
]
