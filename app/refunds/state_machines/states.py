"""
State enums for refund models.

RefundRequest Statuses:
    requested → approved → completed
    requested → rejected

RefundLog Statuses:
    pending → completed
    pending → failed
"""

from django.db import models


class RefundRequestStatus(models.TextChoices):
    """
    Statuses of a buyer's refund request.

    APPROVED and REJECTED are final for the decision. An approved request
    moves on to COMPLETED once its refund executes; a failed execution
    leaves it APPROVED.
    """

    REQUESTED = "requested", "Requested"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    COMPLETED = "completed", "Completed"


class RefundLogStatus(models.TextChoices):
    """
    Statuses of one refund execution attempt.

    Terminal states: COMPLETED, FAILED
    """

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class RefundType(models.TextChoices):
    FULL = "full", "Full"
    PARTIAL = "partial", "Partial"


class RefundScope(models.TextChoices):
    """Which part of an order's money a refund targets."""

    TICKETS_ONLY = "tickets_only", "Tickets only"
    TICKETS_AND_DONATION = "tickets_and_donation", "Tickets and donation"
    DONATION_ONLY = "donation_only", "Donation only"
