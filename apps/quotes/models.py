# apps/quotes/models.py
"""
Quote models.

Models:
- Quote: A request for pricing sent to a catalog owner
- QuoteItem: Line items on a quote

A quote is owned by the user who receives it (the catalog owner). Customers
quote distributors through replicated catalogs; distributors quote suppliers
through consolidated orders. Prices are integers in the minor currency unit.
"""
from django.conf import settings
from django.db import models
from shared.models import TimestampMixin


class Quote(TimestampMixin):
    """
    Quote received by `owner` from a requester.
    """
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('negotiating', 'Negotiating'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
        ('shipped', 'Shipped'),
        ('cancelled', 'Cancelled'),
    ]
    DELIVERY_CHOICES = [
        ('pickup', 'Pickup'),
        ('shipping', 'Shipping'),
    ]

    catalog = models.ForeignKey(
        'catalogs.DigitalCatalog',
        on_delete=models.PROTECT,
        related_name='quotes',
        help_text="Catalog the quote was requested from"
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quotes_received',
        help_text="User who receives and answers the quote"
    )
    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField(blank=True)
    customer_company = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=30, blank=True)
    customer_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quotes_requested',
        help_text="Requester account, when the requester is a registered user"
    )
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='pending'
    )
    delivery_method = models.CharField(
        max_length=20,
        choices=DELIVERY_CHOICES,
        default='pickup'
    )

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'status'], name='quote_owner_status_idx'),
        ]

    def __str__(self):
        return f"Quote #{self.pk} ({self.status})"

    @property
    def total_amount(self):
        return sum(item.subtotal for item in self.items.all())


class QuoteItem(models.Model):
    """
    Line item on a quote.

    `origin_replicated_catalog` records which distributor copy the product was
    sold through, so items from hybrid stores can be traced to their supplier.
    """
    PRICE_TYPE_CHOICES = [
        ('retail', 'Retail'),
        ('wholesale', 'Wholesale'),
    ]

    quote = models.ForeignKey(
        Quote,
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
    subtotal = models.PositiveBigIntegerField(help_text="quantity * unit_price")
    price_type = models.CharField(
        max_length=20,
        choices=PRICE_TYPE_CHOICES,
        default='retail'
    )
    origin_replicated_catalog = models.ForeignKey(
        'catalogs.ReplicatedCatalog',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quote_items',
        help_text="Replicated catalog this item was sold through"
    )

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['origin_replicated_catalog'], name='quoteitem_origin_idx'),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    def save(self, *args, **kwargs):
        self.subtotal = self.quantity * self.unit_price
        super().save(*args, **kwargs)
