"""
Production wiring for the refund orchestrator.

CeleryJobQueue maps the engine's queue names onto Celery tasks, and
get_refund_orchestrator() assembles an orchestrator from the production
collaborators. Tests build RefundOrchestrator directly with fakes.

Usage:
    from refunds.adapters import CeleryJobQueue, get_refund_orchestrator

    CeleryJobQueue().enqueue(
        "event_cancel_refund_worker",
        {"event_id": event.pk, "vendor_id": request.user.pk, "after_order_id": None},
    )
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings

from commerce.ownership import StoreOwnershipResolver
from notifications.services import EmailNotifier
from payments.adapters import StripeRefundGateway
from refunds.services.orchestrator import RefundOrchestrator

logger = logging.getLogger(__name__)


class CeleryJobQueue:
    """Dispatches queue payloads to Celery tasks as keyword arguments."""

    def _tasks(self) -> dict[str, Any]:
        # Imported here to avoid a circular import with refunds.tasks
        from refunds.tasks import process_refund_log, refund_cancelled_event

        return {
            settings.REFUNDS_EXECUTION_QUEUE: process_refund_log,
            settings.REFUNDS_CANCELLATION_QUEUE: refund_cancelled_event,
        }

    def enqueue(self, queue_name: str, payload: dict[str, Any]) -> None:
        """
        Raises:
            ValueError: No task is registered for queue_name
        """
        task = self._tasks().get(queue_name)
        if task is None:
            raise ValueError(f"Unknown refund queue: {queue_name}")

        task.delay(**payload)
        logger.debug(f"Enqueued {queue_name}", extra={"queue": queue_name, **payload})


def get_refund_orchestrator() -> RefundOrchestrator:
    return RefundOrchestrator(
        gateway=StripeRefundGateway(),
        queue=CeleryJobQueue(),
        notifier=EmailNotifier(),
        store_resolver=StoreOwnershipResolver(),
    )
