"""
Refund fan-out for cancelled events.

When a vendor cancels an event every refundable order with tickets for it
gets a full, tickets-only refund. Orders are walked in batches by ascending
id so a large event can be processed across several queue jobs, each one
resuming after the last order of the previous batch.

Usage:
    service = EventCancellationService(get_refund_orchestrator())
    result = service.refund_event_orders(event, vendor)
    if result.success and result.data.next_cursor:
        # queue the next batch
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from commerce.models import Order
from commerce.states import REFUNDABLE_ORDER_STATES
from core.services import BaseService, ServiceResult
from payments.exceptions import LockAcquisitionError
from refunds.exceptions import AccessDeniedError, RefundError
from refunds.services.orchestrator import RefundPayload
from refunds.state_machines import RefundScope, RefundType

if TYPE_CHECKING:
    from commerce.models import Event
    from refunds.services.orchestrator import RefundOrchestrator

CANCELLATION_REASON = "Event cancelled"


@dataclass
class CancellationBatch:
    """
    Outcome of one cancellation batch.

    Attributes:
        processed: Orders examined in this batch
        queued_log_ids: Refund logs created and queued for execution
        failures: Orders whose refund could not be requested
        next_cursor: Order id to resume after, or None when done
    """

    processed: int = 0
    queued_log_ids: list[int] = field(default_factory=list)
    failures: int = 0
    next_cursor: int | None = None


class EventCancellationService(BaseService):
    """Requests refunds for every refundable order of a cancelled event."""

    def __init__(self, orchestrator: RefundOrchestrator):
        self.orchestrator = orchestrator

    def orders_to_refund(self, event: Event, after_order_id: int | None = None):
        """Distinct refundable orders with items for the event, by ascending id."""
        queryset = Order.objects.filter(
            items__target_event_id=event.pk,
            state__in=REFUNDABLE_ORDER_STATES,
        )
        if after_order_id is not None:
            queryset = queryset.filter(pk__gt=after_order_id)
        return queryset.distinct().order_by("id")

    def refund_event_orders(
        self,
        event: Event,
        vendor: Any,
        after_order_id: int | None = None,
        batch_size: int = 50,
    ) -> ServiceResult[CancellationBatch]:
        """
        Request refunds for the next batch of orders.

        A failure on one order is logged and counted; the batch carries on.

        Returns:
            ServiceResult with a CancellationBatch, or a failure result when
            the vendor cannot manage the event
        """
        logger = self.get_logger()

        if not self.orchestrator.access.vendor_can_manage_event(event, vendor):
            return self.handle_exception(
                AccessDeniedError(
                    "You do not have permission to cancel this event.",
                    details={"event_id": event.pk},
                ),
                context=f"Event {event.pk} cancellation refused",
            )

        orders = list(self.orders_to_refund(event, after_order_id)[:batch_size])
        batch = CancellationBatch(processed=len(orders))

        for order in orders:
            payload = RefundPayload(
                refund_type=RefundType.FULL,
                refund_scope=RefundScope.TICKETS_ONLY,
                include_donation=False,
                reason=CANCELLATION_REASON,
            )
            try:
                log_id = self.orchestrator.request_refund(order, event, vendor, payload)
            except (RefundError, LockAcquisitionError) as e:
                batch.failures += 1
                logger.error(
                    f"Failed to refund order {order.pk} for cancelled event {event.pk}: {e.message}",
                    extra={"order_id": order.pk, "event_id": event.pk, "error_code": e.error_code},
                )
                continue
            batch.queued_log_ids.append(log_id)

        if orders and len(orders) >= batch_size:
            batch.next_cursor = orders[-1].pk

        logger.info(
            f"Processed {len(batch.queued_log_ids)} refund(s) for cancelled event {event.pk}",
            extra={
                "event_id": event.pk,
                "processed": batch.processed,
                "failures": batch.failures,
                "next_cursor": batch.next_cursor,
            },
        )
        return ServiceResult.success(batch)
