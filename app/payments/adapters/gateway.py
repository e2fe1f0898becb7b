"""
Refund gateway backed by Stripe.

StripeRefundGateway is the gateway client the refund engine is wired
with. One call refunds an exact amount against one payment and, once
Stripe accepts it, records the refunded amount on the payment row.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from payments.adapters.stripe_adapter import IdempotencyKeyGenerator, StripeAdapter
from payments.exceptions import GatewayError
from payments.models import Payment

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class StripeRefundGateway:
    """
    Refunds payments through Stripe.

    Example:
        gateway = StripeRefundGateway()
        refund_id = gateway.refund(payment, 7500, reference="log:12")
    """

    def refund(
        self,
        payment: Payment,
        amount_cents: int,
        reference: str | None = None,
    ) -> str:
        """
        Refund ``amount_cents`` against ``payment``.

        Args:
            payment: The payment to draw the refund from
            amount_cents: Exact amount to refund, in cents
            reference: Caller reference (the refund log) used for
                idempotency and Stripe metadata

        Returns:
            The Stripe refund ID (re_xxx). Returned even when the payment row
            could not be updated afterwards; that failure is logged.

        Raises:
            GatewayError: Payment cannot be refunded through Stripe, or
                Stripe rejected the refund (StripeError subclasses)
        """
        if payment.gateway != "stripe" or not payment.remote_id:
            raise GatewayError(
                f"Payment {payment.pk} has no Stripe reference to refund against",
                error_code="PAYMENT_NOT_REFUNDABLE",
                details={"payment_id": payment.pk, "gateway": payment.gateway},
            )

        entity = f"{payment.pk}:{reference}" if reference else str(payment.pk)
        result = StripeAdapter.create_refund(
            payment_intent_id=payment.remote_id,
            idempotency_key=IdempotencyKeyGenerator.generate("refund", entity),
            amount_cents=amount_cents,
            reason="requested_by_customer",
            metadata={
                "payment_id": str(payment.pk),
                "order_id": str(payment.order_id),
                "reference": reference or "",
            },
        )

        # Stripe has refunded at this point: the refund id is returned even if
        # the local write fails.
        try:
            self._record_refund(payment.pk, amount_cents)
        except Exception:
            logger.error(
                "Stripe refund succeeded but could not be recorded on the payment",
                extra={
                    "payment_id": payment.pk,
                    "amount_cents": amount_cents,
                    "refund_id": result.id,
                },
                exc_info=True,
            )
            return result.id

        logger.info(
            "Refund recorded against payment",
            extra={
                "payment_id": payment.pk,
                "amount_cents": amount_cents,
                "refund_id": result.id,
            },
        )
        return result.id

    @staticmethod
    def _record_refund(payment_id: int, amount_cents: int) -> None:
        """Add the refunded amount to the payment under a row lock."""
        amount = (Decimal(amount_cents) / 100).quantize(CENTS)
        with transaction.atomic():
            payment = Payment.objects.select_for_update().get(pk=payment_id)
            payment.record_refund(amount)
            payment.save(update_fields=["refunded_amount", "state", "updated_at"])
