"""
State machine enums for payment models.
"""

from payments.state_machines.states import (
    REFUNDABLE_PAYMENT_STATES,
    PaymentState,
)

__all__ = [
    "PaymentState",
    "REFUNDABLE_PAYMENT_STATES",
]
