"""
Commerce models.

Only the fields the refund flows read are modelled here:
- Store: a vendor's storefront; events may be run under a store
- Event: something tickets are sold for, with a refund policy
- Order: a buyer's purchase
- OrderItem: one line of an order (a ticket or a donation)

Money amounts are Decimal with two places. Refund code never does
arithmetic on them directly; it converts to integer cents first.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel
from commerce.states import ItemBundle, OrderState, RefundPolicy


class Store(BaseModel):
    """
    A vendor's storefront.

    Staff of a store manage its events even when they did not create them,
    so ownership checks go through the store as well as the event owner.
    """

    name = models.CharField(max_length=200)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="stores",
        help_text="Account that owns this store",
    )

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class Event(BaseModel):
    """
    An event that sells tickets.

    Fields:
        owner: Vendor account that created the event
        store: Store the event is sold under (optional)
        starts_at: Event start; refund windows count back from here
        refund_policy: One of RefundPolicy
    """

    title = models.CharField(max_length=255)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="events",
        help_text="Vendor account that owns this event",
    )
    store = models.ForeignKey(
        Store,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
        help_text="Store the event is sold under",
    )
    venue_name = models.CharField(max_length=255, blank=True)
    starts_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Event start time",
    )
    refund_policy = models.CharField(
        max_length=32,
        choices=RefundPolicy.choices,
        default=RefundPolicy.NONE,
        help_text="Buyer self-service refund policy",
    )

    class Meta:
        ordering = ["-starts_at"]
        permissions = [
            ("administer_refunds", "Can administer refunds on any event"),
        ]

    def __str__(self) -> str:
        return self.title


class Order(BaseModel):
    """
    A buyer's purchase.

    Guest checkouts have no customer account, only an email.
    """

    order_number = models.CharField(max_length=64, blank=True, db_index=True)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text="Buyer account (empty for guest checkout)",
    )
    email = models.EmailField(blank=True, help_text="Contact email captured at checkout")
    state = models.CharField(
        max_length=16,
        choices=OrderState.choices,
        default=OrderState.DRAFT,
        db_index=True,
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Order total",
    )
    currency = models.CharField(
        max_length=3,
        blank=True,
        help_text="ISO 4217 currency code of the order total",
    )
    placed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.order_number or f"#{self.pk}"

    @property
    def contact_email(self) -> str:
        """Checkout email, falling back to the customer account's email."""
        if self.email:
            return self.email
        if self.customer_id and self.customer:
            return self.customer.email
        return ""


class OrderItem(BaseModel):
    """One line of an order."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    bundle = models.CharField(
        max_length=64,
        choices=ItemBundle.choices,
        default=ItemBundle.TICKET,
        help_text="Item kind; donation bundles are tracked apart from tickets",
    )
    target_event = models.ForeignKey(
        Event,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
        help_text="Event this item grants admission to or donates towards",
    )
    title = models.CharField(max_length=255, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Line total (unit price x quantity, after adjustments)",
    )
    currency = models.CharField(max_length=3, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.title or f"{self.bundle} x{self.quantity}"
