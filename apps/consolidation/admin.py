# apps/consolidation/admin.py
"""
Django admin configuration for consolidated orders.
"""
from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin
from .models import ConsolidatedOrder, ConsolidatedOrderItem


class ConsolidatedOrderItemInline(admin.TabularInline):
    """Inline editor for ConsolidatedOrderItem."""
    model = ConsolidatedOrderItem
    extra = 0
    fields = ['product_name', 'product_sku', 'variant_description', 'quantity', 'unit_price', 'subtotal', 'source_quote_ids']
    readonly_fields = ['subtotal', 'source_quote_ids']


@admin.register(ConsolidatedOrder)
class ConsolidatedOrderAdmin(SimpleHistoryAdmin):
    """Admin interface for ConsolidatedOrder with history tracking."""
    list_display = ['id', 'distributor', 'supplier', 'status', 'items_count_display', 'total_display', 'sent_at', 'created_at']
    list_filter = ['status', 'sent_at']
    search_fields = ['distributor__username', 'supplier__username', 'notes']
    readonly_fields = ['linked_quote', 'sent_at', 'created_at', 'updated_at']
    raw_id_fields = ['distributor', 'supplier', 'source_catalog', 'source_replicated_catalog']
    inlines = [ConsolidatedOrderItemInline]

    fieldsets = [
        (None, {
            'fields': ['distributor', 'supplier', 'status']
        }),
        ('Source', {
            'fields': ['source_catalog', 'source_replicated_catalog']
        }),
        ('Outbound quote', {
            'fields': ['linked_quote', 'sent_at']
        }),
        ('Notes', {
            'fields': ['notes'],
            'classes': ['collapse']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    @admin.display(description='Items')
    def items_count_display(self, obj):
        return obj.items.count()

    @admin.display(description='Total')
    def total_display(self, obj):
        total = sum(item.subtotal for item in obj.items.all())
        return f"{total / 100:.2f}"
