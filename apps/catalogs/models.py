# apps/catalogs/models.py
"""
Catalog models.

Models:
- DigitalCatalog: A supplier-owned product catalog
- ReplicatedCatalog: A distributor's resale copy of a supplier catalog

Catalog content (products, layouts, PDF rendering) lives in other services;
only the ownership links needed to trace quotes back to a supplier are kept here.
"""
from django.conf import settings
from django.db import models
from shared.models import TimestampMixin


class DigitalCatalog(TimestampMixin):
    """
    A catalog published by its owner (the supplier for anyone replicating it).
    """
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='catalogs',
        help_text="User who publishes this catalog"
    )
    name = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner', 'is_active'], name='catalog_owner_active_idx'),
        ]

    def __str__(self):
        return self.name


class ReplicatedCatalog(TimestampMixin):
    """
    A distributor's copy of a supplier catalog.

    Quotes received through this copy (or through a hybrid store that mixes
    several copies) carry a reference back to it on each quote item.
    """
    original_catalog = models.ForeignKey(
        DigitalCatalog,
        on_delete=models.CASCADE,
        related_name='replicas',
        help_text="Supplier catalog this copy was made from"
    )
    distributor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='replicated_catalogs',
        help_text="Distributor reselling from this copy"
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['original_catalog', 'distributor'],
                name='uniq_replica_per_distributor',
            ),
        ]

    def __str__(self):
        return f"{self.original_catalog.name} ({self.distributor})"

    @property
    def supplier(self):
        return self.original_catalog.owner
