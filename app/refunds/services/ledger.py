"""
CRUD persistence for buyer refund requests.

The ledger applies no business rules: it stores the fields it is given
and never checks whether a status change is legal.
"""

from __future__ import annotations

from typing import Any

from django.utils import timezone

from refunds.models import RefundRequest
from refunds.state_machines import RefundRequestStatus


class RefundRequestLedger:
    """Reads and writes refund_request rows."""

    def create(self, **fields: Any) -> int:
        """Insert a request and return its id."""
        request = RefundRequest.objects.create(**fields)
        return request.pk

    def load(self, request_id: Any) -> RefundRequest | None:
        if request_id is None:
            return None
        return RefundRequest.objects.filter(pk=request_id).first()

    def update(self, request_id: Any, **fields: Any) -> int:
        """
        Update a request, always stamping updated_at.

        Returns:
            Number of rows updated (0 if the request does not exist)
        """
        fields["updated_at"] = timezone.now()
        return RefundRequest.objects.filter(pk=request_id).update(**fields)

    def load_pending_by_event(self, event_id: Any) -> list[RefundRequest]:
        """Requests still awaiting a decision for an event, newest first."""
        return list(
            RefundRequest.objects.filter(
                event_id=event_id,
                status=RefundRequestStatus.REQUESTED,
            ).order_by("-created_at", "-id")
        )
