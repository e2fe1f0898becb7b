"""
Celery tasks for refund execution.

This module provides async tasks for:
- Executing a queued refund log against the order's payments
- Requesting refunds for a cancelled event, one batch of orders at a time

Both tasks are dispatched through refunds.adapters.CeleryJobQueue; the
queue names are the REFUNDS_EXECUTION_QUEUE and REFUNDS_CANCELLATION_QUEUE
settings.

Usage:
    from refunds.adapters import CeleryJobQueue

    # Start refunding every order of a cancelled event
    CeleryJobQueue().enqueue(
        settings.REFUNDS_CANCELLATION_QUEUE,
        {"event_id": event.pk, "vendor_id": vendor.pk, "after_order_id": None},
    )
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.conf import settings

from authentication.models import User
from commerce.models import Event
from refunds.adapters import CeleryJobQueue, get_refund_orchestrator
from refunds.exceptions import NotFoundError
from refunds.models import RefundLog
from refunds.services.cancellation import EventCancellationService

logger = logging.getLogger(__name__)


@shared_task(acks_late=True)
def process_refund_log(log_id: int) -> dict:
    """
    Execute one refund log.

    Failures are recorded on the log itself, so this task never retries.

    Args:
        log_id: ID of the RefundLog to execute

    Returns:
        Dict with the log's resulting status
    """
    try:
        get_refund_orchestrator().process_refund(log_id)
    except NotFoundError:
        logger.error("RefundLog not found", extra={"log_id": log_id})
        return {"status": "not_found", "log_id": log_id}

    status = RefundLog.objects.filter(pk=log_id).values_list("status", flat=True).first()
    return {"status": status, "log_id": log_id}


@shared_task(acks_late=True)
def refund_cancelled_event(event_id: int, vendor_id: int, after_order_id: int | None = None) -> dict:
    """
    Request refunds for the next batch of a cancelled event's orders.

    Re-queues itself with the last order id while batches come back full.

    Args:
        event_id: ID of the cancelled Event
        vendor_id: ID of the account that cancelled it
        after_order_id: Resume after this order id

    Returns:
        Dict with batch counts and the cursor queued next, if any
    """
    event = Event.objects.filter(pk=event_id).first()
    if event is None:
        logger.error(f"Event {event_id} not found", extra={"event_id": event_id})
        return {"status": "not_found", "event_id": event_id}

    vendor = User.objects.filter(pk=vendor_id).first()
    if vendor is None:
        logger.error(f"Vendor {vendor_id} not found", extra={"event_id": event_id, "vendor_id": vendor_id})
        return {"status": "not_found", "event_id": event_id}

    service = EventCancellationService(get_refund_orchestrator())
    result = service.refund_event_orders(
        event,
        vendor,
        after_order_id=after_order_id,
        batch_size=settings.REFUNDS_CANCELLATION_BATCH_SIZE,
    )
    if not result.success:
        return {"status": "failed", "event_id": event_id, "error": result.error}

    batch = result.data
    if batch.next_cursor is not None:
        CeleryJobQueue().enqueue(
            settings.REFUNDS_CANCELLATION_QUEUE,
            {"event_id": event_id, "vendor_id": vendor_id, "after_order_id": batch.next_cursor},
        )

    return {
        "status": "ok",
        "event_id": event_id,
        "processed": batch.processed,
        "queued": len(batch.queued_log_ids),
        "failures": batch.failures,
        "next_cursor": batch.next_cursor,
    }
