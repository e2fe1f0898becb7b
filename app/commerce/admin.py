"""
Commerce admin configuration.
"""

from django.contrib import admin

from commerce.models import Event, Order, OrderItem, Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "owner", "created_at"]
    search_fields = ["name", "owner__email"]
    raw_id_fields = ["owner"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "owner", "store", "starts_at", "refund_policy"]
    list_filter = ["refund_policy"]
    search_fields = ["title", "owner__email"]
    raw_id_fields = ["owner", "store"]


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    raw_id_fields = ["target_event"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Orders with their line items inline."""

    list_display = ["id", "order_number", "email", "state", "total_amount", "currency"]
    list_filter = ["state"]
    search_fields = ["order_number", "email", "customer__email"]
    raw_id_fields = ["customer"]
    inlines = [OrderItemInline]
