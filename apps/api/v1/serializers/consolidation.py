# apps/api/v1/serializers/consolidation.py
"""
Serializers for consolidated orders and the outbound quotes they produce.
"""
from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.catalogs.models import DigitalCatalog, ReplicatedCatalog
from apps.consolidation.models import ConsolidatedOrderItem
from apps.consolidation.services import MAX_QUANTITY, ItemInput
from apps.quotes.models import Quote, QuoteItem

User = get_user_model()


# ==================== Consolidated Order Serializers ====================

class ConsolidatedOrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for ConsolidatedOrderItem."""

    class Meta:
        model = ConsolidatedOrderItem
        fields = [
            'id', 'consolidated_order', 'product_id', 'variant_id',
            'product_name', 'product_sku', 'variant_description', 'product_image_url',
            'quantity', 'unit_price', 'subtotal', 'source_quote_ids',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class DraftSummarySerializer(serializers.Serializer):
    """Consolidated order with items and display totals (from DraftSummary)."""
    id = serializers.IntegerField(source='order.pk')
    distributor = serializers.IntegerField(source='order.distributor_id')
    supplier = serializers.IntegerField(source='order.supplier_id')
    source_catalog = serializers.IntegerField(source='order.source_catalog_id')
    source_replicated_catalog = serializers.IntegerField(source='order.source_replicated_catalog_id')
    status = serializers.CharField(source='order.status')
    linked_quote = serializers.IntegerField(source='order.linked_quote_id', allow_null=True)
    notes = serializers.CharField(source='order.notes')
    sent_at = serializers.DateTimeField(source='order.sent_at', allow_null=True)
    created_at = serializers.DateTimeField(source='order.created_at')
    updated_at = serializers.DateTimeField(source='order.updated_at')
    items = ConsolidatedOrderItemSerializer(many=True)
    items_count = serializers.IntegerField()
    total_amount = serializers.IntegerField()
    source_quotes_count = serializers.IntegerField()
    supplier_name = serializers.CharField()
    supplier_business_name = serializers.CharField(allow_null=True)
    catalog_name = serializers.CharField()


class DraftCreateSerializer(serializers.Serializer):
    """Input for get-or-create of a draft."""
    supplier = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    source_catalog = serializers.PrimaryKeyRelatedField(queryset=DigitalCatalog.objects.all())
    source_replicated_catalog = serializers.PrimaryKeyRelatedField(queryset=ReplicatedCatalog.objects.all())


class ItemAddSerializer(serializers.Serializer):
    """Input for adding a product to a draft by hand."""
    product_id = serializers.UUIDField()
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    product_name = serializers.CharField(max_length=255)
    product_sku = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    variant_description = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    product_image_url = serializers.URLField(max_length=500, required=False, allow_null=True, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    unit_price = serializers.IntegerField(min_value=0, help_text="Minor currency units")
    source_quote_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)

    def to_item_input(self):
        data = self.validated_data
        return ItemInput(
            product_id=data['product_id'],
            variant_id=data.get('variant_id'),
            product_name=data['product_name'],
            product_sku=data.get('product_sku') or None,
            variant_description=data.get('variant_description') or None,
            product_image_url=data.get('product_image_url') or None,
            quantity=data['quantity'],
            unit_price=data['unit_price'],
            source_quote_ids=data.get('source_quote_ids', []),
        )


class ItemQuantitySerializer(serializers.Serializer):
    """Input for changing an item's quantity."""
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)


class NotesSerializer(serializers.Serializer):
    """Input for replacing a draft's notes."""
    notes = serializers.CharField(allow_blank=True, trim_whitespace=False)


class SendOrderSerializer(serializers.Serializer):
    """Input for sending a draft to the supplier."""
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class SyncResultSerializer(serializers.Serializer):
    """Outcome of syncing a draft with accepted quotes."""
    order = serializers.IntegerField(source='order.pk')
    candidate_count = serializers.IntegerField()
    inserted_count = serializers.IntegerField()
    inserted_items = ConsolidatedOrderItemSerializer(many=True)


# ==================== Outbound Quote Serializers ====================

class QuoteItemSerializer(serializers.ModelSerializer):
    """Read serializer for QuoteItem."""

    class Meta:
        model = QuoteItem
        fields = [
            'id', 'product_id', 'variant_id', 'product_name', 'product_sku',
            'variant_description', 'product_image_url',
            'quantity', 'unit_price', 'subtotal', 'price_type',
        ]
        read_only_fields = fields


class QuoteSerializer(serializers.ModelSerializer):
    """Read serializer for Quote with nested items."""
    items = QuoteItemSerializer(many=True, read_only=True)

    class Meta:
        model = Quote
        fields = [
            'id', 'catalog', 'owner', 'customer_name', 'customer_email',
            'customer_company', 'customer_phone', 'customer_user',
            'notes', 'status', 'delivery_method', 'items', 'created_at',
        ]
        read_only_fields = fields
