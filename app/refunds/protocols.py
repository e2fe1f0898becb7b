"""
Collaborator interfaces the refund orchestrator is constructed with.

Production implementations:
    RefundGateway -> payments.adapters.StripeRefundGateway
    JobQueue      -> refunds.adapters.CeleryJobQueue
    Notifier      -> notifications.services.EmailNotifier
    StoreResolver -> commerce.ownership.StoreOwnershipResolver

Tests pass in-memory fakes that satisfy the same protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from commerce.models import Event, Store
    from payments.models import Payment


@runtime_checkable
class RefundGateway(Protocol):
    """Refunds an exact amount against one payment."""

    def refund(
        self,
        payment: Payment,
        amount_cents: int,
        reference: str | None = None,
    ) -> str | None:
        """
        Return the gateway's refund identifier.

        Raises:
            GatewayError: The refund was not made
        """
        ...


@runtime_checkable
class JobQueue(Protocol):
    """Durable, fire-and-forget job dispatch."""

    def enqueue(self, queue_name: str, payload: dict[str, Any]) -> None:
        ...


@runtime_checkable
class Notifier(Protocol):
    """Sends templated notifications. Delivery happens out of band."""

    def send(self, template_key: str, recipient: str, context: dict[str, Any]) -> None:
        ...


@runtime_checkable
class StoreResolver(Protocol):
    """Resolves delegated event ownership through stores."""

    def store_for_account(self, account: Any) -> Store | None:
        ...

    def store_owns_event(self, store: Store, event: Event) -> bool:
        ...
