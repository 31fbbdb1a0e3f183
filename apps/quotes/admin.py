# apps/quotes/admin.py
"""
Django admin configuration for Quote models.
"""
from django.contrib import admin
from .models import Quote, QuoteItem


class QuoteItemInline(admin.TabularInline):
    """Inline editor for QuoteItem."""
    model = QuoteItem
    extra = 0
    fields = ['product_name', 'product_sku', 'quantity', 'unit_price', 'subtotal', 'price_type']
    readonly_fields = ['subtotal']


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ['id', 'catalog', 'owner', 'customer_name', 'status', 'created_at']
    list_filter = ['status', 'delivery_method']
    search_fields = ['customer_name', 'customer_email', 'customer_company']
    raw_id_fields = ['catalog', 'owner', 'customer_user']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [QuoteItemInline]
