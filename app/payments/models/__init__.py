"""
Payment domain models.

- Payment: money captured against a commerce order
"""

from payments.models.payment import Payment

__all__ = [
    "Payment",
]
