"""
Refund orchestration: buyer requests, vendor decisions and execution.

Flow:
    buyer   -> request_buyer_refund          RefundRequest(requested)
    vendor  -> approve_buyer_refund_request  RefundRequest(approved) + RefundLog(pending)
            -> reject_buyer_refund_request   RefundRequest(rejected)
    vendor  -> request_refund                RefundLog(pending), vendor-direct
    worker  -> process_refund                RefundLog(completed | failed)

Everything up to the creation of a RefundLog happens synchronously and raises
RefundError subclasses for the caller to present. Execution runs later on a
queue worker: process_refund records every outcome on the log instead of
raising, so its only exception is a missing log.

Usage:
    from refunds.adapters import get_refund_orchestrator

    orchestrator = get_refund_orchestrator()
    request_id = orchestrator.request_buyer_refund(order, event, request.user)
    log_id = orchestrator.approve_buyer_refund_request(request_id, vendor)

    # In the queue worker
    orchestrator.process_refund(log_id)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db.models import Sum
from django.utils import dateformat, timezone

from authentication.models import User
from commerce.models import Event, Order
from core.exceptions import ValidationError
from core.services import BaseService
from payments.exceptions import GatewayError, LockAcquisitionError
from payments.locks import DistributedLock
from refunds.exceptions import (
    AccessDeniedError,
    ExceedsRefundableError,
    IneligibleError,
    InvalidAmountError,
    NotFoundError,
)
from refunds.models import RefundLog, RefundRequest
from refunds.services import money
from refunds.services.access import RefundAccessResolver
from refunds.services.eligibility import ineligibility_reason, order_is_refundable
from refunds.services.ledger import RefundRequestLedger
from refunds.state_machines import (
    RefundLogStatus,
    RefundRequestStatus,
    RefundScope,
    RefundType,
)

if TYPE_CHECKING:
    from payments.models import Payment
    from refunds.protocols import JobQueue, Notifier, RefundGateway, StoreResolver

MSG_ORDER_NOT_FOUND = "Order not found."
MSG_EVENT_NOT_FOUND = "Event not found."
MSG_VENDOR_NOT_FOUND = "Vendor user not found."
MSG_ACCESS_DENIED = "Access denied: vendor cannot refund this order."
MSG_NO_PAYMENTS = "No completed payments found for order."
MSG_NOT_REFUNDED = "Failed to process refund: no eligible payment found or gateway error."


@dataclass
class RefundPayload:
    """
    What a vendor asked to refund.

    Attributes:
        refund_type: full or partial
        refund_scope: tickets_only, tickets_and_donation or donation_only
        amount_cents: Amount for partial refunds (ignored for full refunds)
        reason: Free text stored on the refund log
        include_donation: Add the order's donations to a full
            tickets_and_donation refund; flags a partial refund as covering
            donations
        refund_request_id: Buyer request this refund settles, if any

    Raises:
        ValueError: Unknown refund type or scope
    """

    refund_type: str = RefundType.FULL
    refund_scope: str = RefundScope.TICKETS_ONLY
    amount_cents: int | None = None
    reason: str | None = None
    include_donation: bool = False
    refund_request_id: int | None = None

    def __post_init__(self) -> None:
        self.refund_type = RefundType(self.refund_type)
        self.refund_scope = RefundScope(self.refund_scope)


class RefundOrchestrator(BaseService):
    """
    The refund state machine and execution core.

    Args:
        gateway: Refunds money against a single payment
        queue: Dispatches execution jobs
        notifier: Sends templated emails; failures are logged and ignored
        store_resolver: Resolves delegated event ownership through stores
        ledger: Refund request persistence (defaults to RefundRequestLedger)
    """

    def __init__(
        self,
        gateway: RefundGateway,
        queue: JobQueue,
        notifier: Notifier,
        store_resolver: StoreResolver,
        ledger: RefundRequestLedger | None = None,
    ):
        self.gateway = gateway
        self.queue = queue
        self.notifier = notifier
        self.access = RefundAccessResolver(store_resolver)
        self.ledger = ledger or RefundRequestLedger()

    # ==========================================================================
    # Buyer Requests
    # ==========================================================================

    def request_buyer_refund(self, order: Order, event: Event, buyer: Any) -> int:
        """
        Record a buyer's refund request for the tickets of one event.

        The amount is the order's ticket subtotal for the event; donations
        are never part of a buyer request.

        Returns:
            The new RefundRequest id

        Raises:
            IneligibleError: The first eligibility check that failed
            InvalidAmountError: The event's tickets on the order total nothing
        """
        reason = ineligibility_reason(order, event, buyer)
        if reason is not None:
            raise IneligibleError(reason, details={"order_id": order.pk, "event_id": event.pk})

        amount_cents = money.ticket_subtotal_cents(order, event)
        if amount_cents <= 0:
            raise InvalidAmountError(
                "This order has no ticket amount to refund for this event.",
                details={"order_id": order.pk, "event_id": event.pk, "amount_cents": amount_cents},
            )

        request_id = self.ledger.create(
            order_id=order.pk,
            event_id=event.pk,
            buyer_id=buyer.pk,
            vendor_id=event.owner_id,
            amount_cents=amount_cents,
            currency=self._currency(order),
            status=RefundRequestStatus.REQUESTED,
        )

        self.get_logger().info(
            f"Refund request {request_id} created for order {order.pk}",
            extra={
                "refund_request_id": request_id,
                "order_id": order.pk,
                "event_id": event.pk,
                "amount_cents": amount_cents,
            },
        )

        refund_request = self.ledger.load(request_id)
        context = self._request_context(refund_request, order, event)
        self._notify("refund_request_received", self._buyer_email(order, buyer), context)
        self._notify("refund_request_vendor_alert", self._account_email(refund_request.vendor_id), context)
        return request_id

    def approve_buyer_refund_request(self, request_id: int, vendor: Any) -> int:
        """
        Approve a pending buyer request and create its refund execution.

        The status change, the refund log and the back-reference are written
        in one transaction: if the refund cannot be created (for example the
        payments no longer cover it) the request stays requested.

        Returns:
            The RefundLog id of the queued execution

        Raises:
            NotFoundError: Request missing or already decided, order or event missing
            AccessDeniedError: The vendor cannot refund this order
            InvalidAmountError, ExceedsRefundableError: From request_refund
        """
        refund_request, order, event = self._load_pending_request(request_id, vendor)

        payload = RefundPayload(
            refund_type=RefundType.FULL,
            refund_scope=RefundScope.TICKETS_ONLY,
            include_donation=False,
            refund_request_id=refund_request.pk,
        )

        with self._order_lock(order), self.atomic():
            self._lock_pending_request(refund_request.pk)
            self.ledger.update(refund_request.pk, status=RefundRequestStatus.APPROVED)
            log = self._create_refund_log(order, event, vendor, payload)
            self.ledger.update(refund_request.pk, refund_log_id=log.pk)

        self._enqueue_execution(log)

        self.get_logger().info(
            f"Refund request {refund_request.pk} approved as refund log {log.pk}",
            extra={"refund_request_id": refund_request.pk, "log_id": log.pk, "order_id": order.pk},
        )

        context = self._request_context(refund_request, order, event)
        self._notify("refund_request_approved", self._buyer_email(order, refund_request.buyer_id), context)
        self._notify("refund_request_approved", self._account_email(refund_request.vendor_id), context)
        return log.pk

    def reject_buyer_refund_request(self, request_id: int, vendor: Any, reason: str) -> None:
        """
        Reject a pending buyer request. Rejection is final; nothing is refunded.

        Raises:
            ValidationError: reason is missing or blank
            NotFoundError: Request missing or already decided, order or event missing
            AccessDeniedError: The vendor cannot refund this order
        """
        validation = self.validate_required(reason=reason)
        if validation:
            raise ValidationError("A reason is required to reject a refund request.", details=validation.errors)

        refund_request, order, event = self._load_pending_request(request_id, vendor)
        reason = reason.strip()

        with self._order_lock(order), self.atomic():
            self._lock_pending_request(refund_request.pk)
            self.ledger.update(
                refund_request.pk,
                status=RefundRequestStatus.REJECTED,
                decision_reason=reason,
            )

        self.get_logger().info(
            f"Refund request {refund_request.pk} rejected",
            extra={"refund_request_id": refund_request.pk, "order_id": order.pk},
        )

        context = {**self._request_context(refund_request, order, event), "reason": reason}
        self._notify("refund_request_rejected", self._buyer_email(order, refund_request.buyer_id), context)
        self._notify("refund_request_rejected", self._account_email(refund_request.vendor_id), context)

    def pending_requests_for_event(self, event: Event, vendor: Any) -> list[RefundRequest]:
        """Requests awaiting a decision for an event the vendor manages, newest first."""
        if not self.access.vendor_can_manage_event(event, vendor):
            raise AccessDeniedError(
                "You do not have permission to manage refunds for this event.",
                details={"event_id": event.pk},
            )
        return self.ledger.load_pending_by_event(event.pk)

    # ==========================================================================
    # Vendor Refunds
    # ==========================================================================

    def request_refund(
        self,
        order: Order,
        event: Event,
        account: Any,
        payload: RefundPayload,
    ) -> int:
        """
        Validate a vendor refund and queue it for execution.

        Returns:
            The new RefundLog id

        Raises:
            AccessDeniedError: The account cannot refund this order
            InvalidAmountError: The resolved amount is not positive
            ExceedsRefundableError: The order's payments cannot cover the amount
            LockAcquisitionError: Another refund for the order held the lock too long
        """
        with self._order_lock(order), self.atomic():
            log = self._create_refund_log(order, event, account, payload)

        self._enqueue_execution(log)
        return log.pk

    def _create_refund_log(
        self,
        order: Order,
        event: Event,
        account: Any,
        payload: RefundPayload,
    ) -> RefundLog:
        """Validate and insert a pending log. Callers hold the order lock."""
        if not self.access.vendor_can_refund_order(order, event, account):
            raise AccessDeniedError(MSG_ACCESS_DENIED, details={"order_id": order.pk, "event_id": event.pk})
        if not order_is_refundable(order):
            raise AccessDeniedError(
                "This order is not in a refundable state.",
                details={"order_id": order.pk, "state": order.state},
            )

        amount_cents, donation_refunded = self._resolve_amount(order, event, payload)
        if amount_cents <= 0:
            raise InvalidAmountError(
                "Refund amount must be greater than zero.",
                details={"amount_cents": amount_cents},
            )

        refundable_cents = money.refundable_amount_cents(order)
        reserved_cents = self._reserved_cents(order)
        if amount_cents > refundable_cents - reserved_cents:
            raise ExceedsRefundableError(
                "Refund amount exceeds refundable amount.",
                details={
                    "amount_cents": amount_cents,
                    "refundable_cents": refundable_cents,
                    "reserved_cents": reserved_cents,
                },
            )

        log = RefundLog.objects.create(
            order_id=order.pk,
            event_id=event.pk,
            vendor_id=account.pk,
            refund_request_id=payload.refund_request_id,
            refund_type=payload.refund_type,
            refund_scope=payload.refund_scope,
            amount_cents=amount_cents,
            currency=self._currency(order),
            donation_refunded=donation_refunded,
            reason=payload.reason,
        )

        self.get_logger().info(
            f"Refund requested: log {log.pk}, order {order.pk}, {amount_cents} cents",
            extra={"log_id": log.pk, "order_id": order.pk, "amount_cents": amount_cents},
        )
        return log

    def _resolve_amount(self, order: Order, event: Event, payload: RefundPayload) -> tuple[int, bool]:
        """Return (amount_cents, donation_refunded) for a payload."""
        if payload.refund_type == RefundType.PARTIAL:
            return int(payload.amount_cents or 0), bool(payload.include_donation)

        if payload.refund_scope == RefundScope.DONATION_ONLY:
            return money.donation_total_cents(order), True

        tickets = money.ticket_subtotal_cents(order, event)
        if payload.refund_scope == RefundScope.TICKETS_AND_DONATION and payload.include_donation:
            return tickets + money.donation_total_cents(order), True
        return tickets, False

    def _reserved_cents(self, order: Order) -> int:
        """Amount already claimed by executions that have not run yet."""
        if not settings.REFUNDS_RESERVE_PENDING_AMOUNTS:
            return 0
        total = RefundLog.objects.filter(
            order_id=order.pk,
            status=RefundLogStatus.PENDING,
        ).aggregate(total=Sum("amount_cents"))["total"]
        return total or 0

    def _enqueue_execution(self, log: RefundLog) -> None:
        self.queue.enqueue(settings.REFUNDS_EXECUTION_QUEUE, {"log_id": log.pk})

    # ==========================================================================
    # Execution
    # ==========================================================================

    def process_refund(self, log_id: int) -> None:
        """
        Execute a pending refund log against the order's payments.

        Safe to call repeatedly: only a pending log is executed, and a
        concurrent call for the same log returns without doing anything.

        Raises:
            NotFoundError: No refund log with this id
        """
        logger = self.get_logger()
        if not RefundLog.objects.filter(pk=log_id).exists():
            raise NotFoundError(f"Refund log ID {log_id} not found.", details={"log_id": log_id})

        lock = DistributedLock(
            f"refund:log:{log_id}",
            ttl=settings.REFUNDS_LOCK_TTL,
            blocking=False,
        )
        try:
            with lock:
                self._execute(log_id)
        except LockAcquisitionError:
            logger.warning(
                f"Refund log {log_id} is already being processed",
                extra={"log_id": log_id},
            )

    def _execute(self, log_id: int) -> None:
        logger = self.get_logger()

        with self.atomic():
            log = RefundLog.objects.select_for_update().get(pk=log_id)
            if not log.is_pending:
                logger.warning(
                    f"Refund log {log_id} is not pending (status: {log.status})",
                    extra={"log_id": log_id, "status": log.status},
                )
                return

        order = Order.objects.filter(pk=log.order_id).first()
        if order is None:
            self._mark_refund_failed(log, MSG_ORDER_NOT_FOUND)
            return

        event = Event.objects.filter(pk=log.event_id).first()
        if event is None:
            self._mark_refund_failed(log, MSG_EVENT_NOT_FOUND)
            return

        vendor = User.objects.filter(pk=log.vendor_id).first()
        if vendor is None:
            self._mark_refund_failed(log, MSG_VENDOR_NOT_FOUND)
            return

        if not self.access.vendor_can_refund_order(order, event, vendor):
            self._mark_refund_failed(log, MSG_ACCESS_DENIED)
            return

        payments = money.refundable_payments(order)
        if not payments:
            self._mark_refund_failed(log, MSG_NO_PAYMENTS)
            return

        refunded_payment, gateway_refund_id = self._refund_first_payment(log, payments)
        if refunded_payment is None:
            self._mark_refund_failed(log, MSG_NOT_REFUNDED)
            return

        log.complete(gateway_refund_id=gateway_refund_id, payment=refunded_payment)
        log.save()

        if log.refund_request_id:
            self.ledger.update(log.refund_request_id, status=RefundRequestStatus.COMPLETED)

        logger.info(
            f"Refund completed: log {log.pk}, order {order.pk}",
            extra={
                "log_id": log.pk,
                "order_id": order.pk,
                "payment_id": refunded_payment.pk,
                "amount_cents": log.amount_cents,
            },
        )

        context = self._processed_context(log, order, event)
        self._notify("refund_processed", order.contact_email, context)
        if log.refund_request_id:
            self._notify("refund_processed_vendor", vendor.email, context)

    def _refund_first_payment(
        self,
        log: RefundLog,
        payments: list[Payment],
    ) -> tuple[Payment | None, str | None]:
        """
        Refund the full log amount against the first payment that succeeds.

        A gateway failure on one payment moves on to the next candidate.
        """
        logger = self.get_logger()

        for payment in payments:
            available = money.payment_available_cents(payment)
            if available < log.amount_cents:
                logger.warning(
                    f"Skipping payment {payment.pk}: {available} cents available, "
                    f"{log.amount_cents} needed",
                    extra={"log_id": log.pk, "payment_id": payment.pk},
                )
                continue

            try:
                gateway_refund_id = self.gateway.refund(payment, log.amount_cents, reference=str(log.pk))
            except GatewayError as e:
                logger.error(
                    f"Refund failed for payment {payment.pk}: {e.message}",
                    extra={"log_id": log.pk, "payment_id": payment.pk, "error_code": e.error_code},
                )
                continue
            except Exception as e:
                logger.error(
                    f"Unexpected error refunding payment {payment.pk}: {e}",
                    extra={"log_id": log.pk, "payment_id": payment.pk},
                    exc_info=True,
                )
                continue

            return payment, gateway_refund_id

        return None, None

    def _mark_refund_failed(self, log: RefundLog, error_message: str) -> None:
        """Record a terminal failure. The engine never retries a failed log."""
        log.fail(error_message)
        log.save()

        self.get_logger().error(
            f"Refund failed: log {log.pk}, error: {error_message}",
            extra={"log_id": log.pk, "order_id": log.order_id},
        )

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _load_pending_request(self, request_id: int, vendor: Any) -> tuple[RefundRequest, Order, Event]:
        """Run the shared guards for approving and rejecting a request."""
        refund_request = self.ledger.load(request_id)
        if refund_request is None or refund_request.status != RefundRequestStatus.REQUESTED:
            raise NotFoundError(
                "Refund request not found or already processed.",
                details={"refund_request_id": request_id},
            )

        order = Order.objects.filter(pk=refund_request.order_id).first()
        event = Event.objects.filter(pk=refund_request.event_id).first()
        if order is None or event is None:
            raise NotFoundError(
                "Order or event not found.",
                details={"refund_request_id": request_id},
            )

        if not self.access.vendor_can_refund_order(order, event, vendor):
            raise AccessDeniedError(MSG_ACCESS_DENIED, details={"refund_request_id": request_id})

        return refund_request, order, event

    @staticmethod
    def _lock_pending_request(request_id: int) -> RefundRequest:
        """
        Re-read a request under a row lock inside the decision transaction.

        The status checked by _load_pending_request may be stale by the time
        the order lock is held; a request decided in between is rejected here.
        """
        refund_request = RefundRequest.objects.select_for_update().filter(pk=request_id).first()
        if refund_request is None or refund_request.status != RefundRequestStatus.REQUESTED:
            raise NotFoundError(
                "Refund request not found or already processed.",
                details={"refund_request_id": request_id},
            )
        return refund_request

    def _order_lock(self, order: Order) -> DistributedLock:
        return DistributedLock(
            f"refund:order:{order.pk}",
            ttl=settings.REFUNDS_LOCK_TTL,
            timeout=settings.REFUNDS_LOCK_TIMEOUT,
        )

    @staticmethod
    def _currency(order: Order) -> str:
        return (order.currency or settings.REFUNDS_DEFAULT_CURRENCY).lower()

    @staticmethod
    def _account_email(account_id: int | None) -> str:
        if account_id is None:
            return ""
        return User.objects.filter(pk=account_id).values_list("email", flat=True).first() or ""

    def _buyer_email(self, order: Order, buyer: Any) -> str:
        """Order email first; the buyer account (or its id) second."""
        if order.email:
            return order.email
        if isinstance(buyer, User):
            return buyer.email
        return self._account_email(buyer)

    @staticmethod
    def _request_context(refund_request: RefundRequest, order: Order, event: Event) -> dict[str, Any]:
        return {
            "refund_request_id": refund_request.pk,
            "order_number": str(order),
            "event_title": event.title,
            "amount": money.format_cents(refund_request.amount_cents, refund_request.currency),
        }

    @staticmethod
    def _processed_context(log: RefundLog, order: Order, event: Event) -> dict[str, Any]:
        event_date = ""
        if event.starts_at:
            event_date = dateformat.format(timezone.localtime(event.starts_at), "F j, Y g:i A")
        return {
            "event_title": event.title,
            "event_date": event_date,
            "event_location": event.venue_name,
            "order_number": str(order),
            "refunded_amount": money.format_cents(log.amount_cents, log.currency),
            "donation_refunded": log.donation_refunded,
            "my_tickets_url": settings.REFUNDS_MY_TICKETS_URL,
        }

    def _notify(self, template_key: str, recipient: str, context: dict[str, Any]) -> None:
        """Send a notification; a notifier failure never fails the refund operation."""
        try:
            self.notifier.send(template_key, recipient, context)
        except Exception as e:
            self.get_logger().warning(
                f"Failed to send {template_key} notification: {e}",
                extra={"template_key": template_key},
                exc_info=True,
            )
