# apps/consolidation/aggregation.py
"""
Grouping of accepted quote lines into consolidated order buckets.

A bucket is one (product_id, variant_id) pair; a missing variant is its own
bucket. This module is pure: it works on plain records so it can be used
and tested without the database.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple
from uuid import UUID


BucketKey = Tuple[UUID, Optional[UUID]]


# ─── Data Classes ───────────────────────────────────────────────────────────────

@dataclass
class QuoteLine:
    """An accepted quote item, as read from the quotes app."""
    quote_id: int
    product_id: UUID
    variant_id: Optional[UUID]
    product_name: str
    quantity: int
    unit_price: int
    product_sku: Optional[str] = None
    variant_description: Optional[str] = None
    product_image_url: Optional[str] = None

    @property
    def bucket_key(self) -> BucketKey:
        return (self.product_id, self.variant_id)


@dataclass
class ProductAggregation:
    """Sum of every quote line that falls in one bucket."""
    product_id: UUID
    variant_id: Optional[UUID]
    product_name: str
    product_sku: Optional[str]
    variant_description: Optional[str]
    product_image_url: Optional[str]
    total_quantity: int
    unit_price: int
    source_quote_ids: List[int] = field(default_factory=list)

    @property
    def bucket_key(self) -> BucketKey:
        return (self.product_id, self.variant_id)

    @property
    def subtotal(self) -> int:
        return self.total_quantity * self.unit_price


# ─── Aggregation ────────────────────────────────────────────────────────────────

def aggregate_quote_lines(lines: Iterable[QuoteLine]) -> List[ProductAggregation]:
    """
    Group quote lines by bucket.

    Quantities are summed and contributing quote ids collected once each, in
    the order first seen. Name, SKU, variant description and unit price come
    from the first line of the bucket; the image is the first one present.
    Buckets are returned in the order they were first seen.
    """
    buckets = {}

    for line in lines:
        key = line.bucket_key
        existing = buckets.get(key)
        if existing is None:
            buckets[key] = ProductAggregation(
                product_id=line.product_id,
                variant_id=line.variant_id,
                product_name=line.product_name,
                product_sku=line.product_sku,
                variant_description=line.variant_description,
                product_image_url=line.product_image_url or None,
                total_quantity=line.quantity,
                unit_price=line.unit_price,
                source_quote_ids=[line.quote_id],
            )
            continue

        existing.total_quantity += line.quantity
        if line.quote_id not in existing.source_quote_ids:
            existing.source_quote_ids.append(line.quote_id)
        if not existing.product_image_url and line.product_image_url:
            existing.product_image_url = line.product_image_url

    return list(buckets.values())


def merge_source_ids(current, extra):
    """Union of two quote id lists, keeping the order of `current` first."""
    merged = list(current or [])
    for quote_id in extra or []:
        if quote_id not in merged:
            merged.append(quote_id)
    return merged
