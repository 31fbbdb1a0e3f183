# apps/consolidation/models.py
"""
Consolidated order models.

Models:
- ConsolidatedOrder: A distributor's draft purchase order to one supplier,
  built from the customer quotes the distributor accepted
- ConsolidatedOrderItem: One bucket (product + variant) of the draft

Amounts are integers in the minor currency unit.
"""
from django.conf import settings
from django.db import models
from django.db.models import Q
from simple_history.models import HistoricalRecords
from shared.models import TimestampMixin


class ConsolidatedOrder(TimestampMixin):
    """
    Draft purchase order that merges accepted quotes destined for one supplier.

    At most one `draft` order exists per (distributor, supplier). Sending the
    draft creates an outbound Quote for the supplier and links it here.
    `sent` and `cancelled` are terminal.
    """
    STATUS_DRAFT = 'draft'
    STATUS_SENT = 'sent'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_SENT, 'Sent'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    distributor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='consolidated_orders',
        help_text="Distributor who owns and edits this order"
    )
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='consolidated_orders_received',
        help_text="Supplier the order will be sent to"
    )
    source_catalog = models.ForeignKey(
        'catalogs.DigitalCatalog',
        on_delete=models.PROTECT,
        related_name='consolidated_orders',
        help_text="Supplier catalog the outbound quote is raised against"
    )
    source_replicated_catalog = models.ForeignKey(
        'catalogs.ReplicatedCatalog',
        on_delete=models.PROTECT,
        related_name='consolidated_orders',
        help_text="Distributor copy whose accepted quotes feed this order"
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT
    )
    linked_quote = models.OneToOneField(
        'quotes.Quote',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='consolidated_order',
        help_text="Outbound quote created when the order was sent"
    )
    notes = models.TextField(blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    # Audit trail
    history = HistoricalRecords()

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['distributor', 'supplier'],
                condition=Q(status='draft'),
                name='uniq_open_draft_per_supplier',
            ),
        ]
        indexes = [
            models.Index(fields=['distributor', 'status'], name='consol_distributor_status_idx'),
        ]

    def __str__(self):
        return f"Consolidated order #{self.pk} ({self.status})"

    @property
    def is_editable(self):
        """Returns True while the order is still a draft."""
        return self.status == self.STATUS_DRAFT


class ConsolidatedOrderItem(TimestampMixin):
    """
    One product/variant bucket on a consolidated order.

    `subtotal` is derived from quantity and unit price on every save.
    A null variant is its own bucket, separate from any concrete variant.
    """
    consolidated_order = models.ForeignKey(
        ConsolidatedOrder,
        on_delete=models.CASCADE,
        related_name='items'
    )
    product_id = models.UUIDField()
    variant_id = models.UUIDField(null=True, blank=True)
    product_name = models.CharField(max_length=255)
    product_sku = models.CharField(max_length=100, blank=True, null=True)
    variant_description = models.CharField(max_length=255, blank=True, null=True)
    product_image_url = models.URLField(max_length=500, blank=True, null=True)
    quantity = models.PositiveIntegerField()
    unit_price = models.PositiveBigIntegerField(help_text="Minor currency units")
    subtotal = models.PositiveBigIntegerField(editable=False)
    source_quote_ids = models.JSONField(
        default=list,
        blank=True,
        help_text="Accepted quotes that contributed to this bucket"
    )

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['consolidated_order', 'product_id'],
                condition=Q(variant_id__isnull=True),
                name='uniq_consol_item_no_variant',
            ),
            models.UniqueConstraint(
                fields=['consolidated_order', 'product_id', 'variant_id'],
                condition=Q(variant_id__isnull=False),
                name='uniq_consol_item_variant',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='consol_item_quantity_positive',
            ),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    @property
    def bucket_key(self):
        return (self.product_id, self.variant_id)

    def save(self, *args, **kwargs):
        self.subtotal = self.quantity * self.unit_price
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'quantity' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'subtotal'}
        super().save(*args, **kwargs)
