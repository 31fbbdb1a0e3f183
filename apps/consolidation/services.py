# apps/consolidation/services.py
"""
Consolidated order service layer.

A distributor resells a supplier's catalog through a replicated copy. Every
customer quote the distributor accepts through that copy adds demand for the
supplier's products. This service folds that demand into one draft order per
(distributor, supplier), lets the distributor adjust it, and finally sends it
to the supplier as a new pending quote.

Rules:
- At most one open draft per (distributor, supplier); enforced in the
  database, surfaced as Conflict.
- One item per (product, variant) bucket per draft.
- Sync only adds buckets the draft does not have yet; it never changes the
  quantity of a bucket already on the draft.
- subtotal is always quantity * unit_price.
- Only the owning distributor can read or change a draft, and only while it
  is a draft.
- Sending is all-or-nothing.

Usage:
    from apps.consolidation.services import ConsolidatedOrderService

    service = ConsolidatedOrderService()
    result = service.get_or_create_draft(
        distributor=request.user,
        supplier=supplier,
        source_catalog=catalog,
        source_replicated_catalog=replica,
    )
    quote = service.send_order(result.order.pk, request.user, notes='Deliver Monday')
"""
import logging
import uuid
from dataclasses import dataclass, field
from functools import partial
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.quotes.models import Quote, QuoteItem
from users.models import BusinessProfile

from .aggregation import QuoteLine, aggregate_quote_lines, merge_source_ids
from .exceptions import Conflict, Forbidden, InvalidArgument, InvalidState, NotFound
from .models import ConsolidatedOrder, ConsolidatedOrderItem

logger = logging.getLogger(__name__)

DEFAULT_SUPPLIER_NAME = 'Supplier'
DEFAULT_CATALOG_NAME = 'Catalog'
OUTBOUND_NOTES_HEADER = 'Consolidated order'
OUTBOUND_PRICE_TYPE = 'wholesale'
OUTBOUND_DELIVERY_METHOD = 'pickup'

# Upper bound of the quantity columns (PositiveIntegerField)
MAX_QUANTITY = 2147483647


# ─── Data Classes ───────────────────────────────────────────────────────────────

@dataclass
class ItemInput:
    """Input for adding a product to a draft by hand."""
    product_id: uuid.UUID
    product_name: str
    quantity: int
    unit_price: int
    variant_id: Optional[uuid.UUID] = None
    product_sku: Optional[str] = None
    variant_description: Optional[str] = None
    product_image_url: Optional[str] = None
    source_quote_ids: List[int] = field(default_factory=list)


@dataclass
class DraftResult:
    """Result of get_or_create_draft."""
    order: ConsolidatedOrder
    items: List[ConsolidatedOrderItem]
    is_new: bool


@dataclass
class SyncResult:
    """Result of syncing a draft with accepted quotes."""
    order: ConsolidatedOrder
    inserted_items: List[ConsolidatedOrderItem]
    candidate_count: int

    @property
    def inserted_count(self):
        return len(self.inserted_items)


@dataclass
class DraftSummary:
    """A consolidated order with its items and display totals."""
    order: ConsolidatedOrder
    items: List[ConsolidatedOrderItem]
    supplier_name: str
    supplier_business_name: Optional[str]
    catalog_name: str

    @property
    def items_count(self):
        return len(self.items)

    @property
    def total_amount(self):
        return sum(item.subtotal for item in self.items)

    @property
    def source_quotes_count(self):
        quote_ids = set()
        for item in self.items:
            quote_ids.update(item.source_quote_ids or [])
        return len(quote_ids)


# ─── Consolidated Order Service ─────────────────────────────────────────────────

class ConsolidatedOrderService:
    """
    Service class for consolidated order operations.

    Every method takes the acting distributor explicitly and checks ownership
    itself; nothing relies on request-scoped state.
    """

    # ─── Draft Store ────────────────────────────────────────────────────────────

    def get_open_draft(self, distributor, supplier):
        """Return the distributor's open draft for `supplier`, or None."""
        return ConsolidatedOrder.objects.filter(
            distributor=distributor,
            supplier=supplier,
            status=ConsolidatedOrder.STATUS_DRAFT,
        ).first()

    def create_draft(self, distributor, supplier, source_catalog, source_replicated_catalog):
        """
        Open a new draft for (distributor, supplier).

        Raises:
            InvalidArgument: catalogs do not connect distributor and supplier
            Conflict: an open draft already exists for the pair
        """
        self._validate_sources(distributor, supplier, source_catalog, source_replicated_catalog)

        try:
            with transaction.atomic():
                already_open = ConsolidatedOrder.objects.select_for_update().filter(
                    distributor=distributor,
                    supplier=supplier,
                    status=ConsolidatedOrder.STATUS_DRAFT,
                ).exists()
                if already_open:
                    raise Conflict(
                        "An open consolidated order already exists for this supplier.",
                        distributor_id=distributor.pk,
                        supplier_id=supplier.pk,
                        rule='one_open_draft_per_supplier',
                    )
                order = ConsolidatedOrder.objects.create(
                    distributor=distributor,
                    supplier=supplier,
                    source_catalog=source_catalog,
                    source_replicated_catalog=source_replicated_catalog,
                )
        except IntegrityError as exc:
            raise Conflict(
                "An open consolidated order already exists for this supplier.",
                distributor_id=distributor.pk,
                supplier_id=supplier.pk,
                rule='one_open_draft_per_supplier',
            ) from exc

        logger.info(
            'Created consolidated order %s (distributor=%s, supplier=%s)',
            order.pk, distributor.pk, supplier.pk,
        )
        return order

    def get_or_create_draft(self, distributor, supplier, source_catalog, source_replicated_catalog):
        """
        Return the open draft for (distributor, supplier), creating it if needed.

        A new draft is synced with accepted quotes straight away. If another
        request opens the draft first, that draft is returned.
        """
        existing = self.get_open_draft(distributor, supplier)
        if existing:
            return DraftResult(order=existing, items=list(existing.items.all()), is_new=False)

        try:
            with transaction.atomic():
                order = self.create_draft(
                    distributor, supplier, source_catalog, source_replicated_catalog,
                )
                self._sync(order, distributor)
        except Conflict:
            order = self.get_open_draft(distributor, supplier)
            if order is None:
                raise
            return DraftResult(order=order, items=list(order.items.all()), is_new=False)

        return DraftResult(order=order, items=list(order.items.all()), is_new=True)

    def list_drafts(self, distributor, status=None, supplier=None):
        """
        List the distributor's consolidated orders, newest first, with totals.

        Args:
            distributor: Acting distributor
            status: Optional status filter ('draft', 'sent', 'cancelled')
            supplier: Optional supplier (user or pk) filter
        """
        valid_statuses = {choice for choice, _ in ConsolidatedOrder.STATUS_CHOICES}
        if status and status not in valid_statuses:
            raise InvalidArgument(
                f"Unknown status '{status}'.",
                status=status,
                rule='status_choice',
            )

        orders = ConsolidatedOrder.objects.filter(distributor=distributor)
        if status:
            orders = orders.filter(status=status)
        if supplier:
            orders = orders.filter(supplier=supplier)
        orders = list(
            orders.select_related('source_catalog')
            .prefetch_related('items')
            .order_by('-created_at', '-id')
        )
        if not orders:
            return []

        business_names = dict(
            BusinessProfile.objects.filter(
                user_id__in={order.supplier_id for order in orders}
            ).values_list('user_id', 'business_name')
        )
        return [self._summarize(order, business_names) for order in orders]

    def get_draft_for_supplier(self, distributor, supplier):
        """Return the open draft for `supplier` with totals, or None."""
        order = ConsolidatedOrder.objects.filter(
            distributor=distributor,
            supplier=supplier,
            status=ConsolidatedOrder.STATUS_DRAFT,
        ).select_related('source_catalog').prefetch_related('items').first()
        if order is None:
            return None
        return self._summarize(order)

    def get_order(self, order_id, distributor):
        """Return one of the distributor's orders (any status) with totals."""
        order = self._get_owned_order(order_id, distributor)
        return self._summarize(order)

    # ─── Aggregation ────────────────────────────────────────────────────────────

    def sync_draft(self, order_id, distributor):
        """
        Add buckets from newly accepted quotes to a draft.

        Running it again over unchanged quotes inserts nothing.
        """
        order = self._get_editable_order(order_id, distributor)
        return self._sync(order, distributor)

    def accepted_quote_lines(self, distributor, replicated_catalog_id):
        """
        Items of accepted quotes received by `distributor` that were sold
        through the given replicated catalog (directly or via a hybrid store).
        """
        items = QuoteItem.objects.filter(
            origin_replicated_catalog_id=replicated_catalog_id,
            quote__status='accepted',
            quote__owner=distributor,
        ).order_by('quote__created_at', 'quote_id', 'id')

        return [
            QuoteLine(
                quote_id=item.quote_id,
                product_id=item.product_id,
                variant_id=item.variant_id,
                product_name=item.product_name,
                product_sku=item.product_sku,
                variant_description=item.variant_description,
                product_image_url=item.product_image_url,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in items
        ]

    def _sync(self, order, distributor):
        lines = self.accepted_quote_lines(distributor, order.source_replicated_catalog_id)
        buckets = aggregate_quote_lines(lines)

        try:
            with transaction.atomic():
                # Status is re-checked under the row lock send_order takes
                self._get_editable_order(order.pk, distributor, lock=True)
                existing_keys = set(order.items.values_list('product_id', 'variant_id'))
                new_items = [
                    ConsolidatedOrderItem(
                        consolidated_order=order,
                        product_id=bucket.product_id,
                        variant_id=bucket.variant_id,
                        product_name=bucket.product_name,
                        product_sku=bucket.product_sku,
                        variant_description=bucket.variant_description,
                        product_image_url=bucket.product_image_url,
                        quantity=bucket.total_quantity,
                        unit_price=bucket.unit_price,
                        subtotal=bucket.subtotal,
                        source_quote_ids=bucket.source_quote_ids,
                    )
                    for bucket in buckets
                    if bucket.bucket_key not in existing_keys
                ]
                created = ConsolidatedOrderItem.objects.bulk_create(new_items) if new_items else []
        except IntegrityError as exc:
            raise Conflict(
                "The order was changed by another request while syncing. Sync again.",
                order_id=order.pk,
                rule='one_item_per_bucket',
            ) from exc

        if not lines:
            logger.info('Consolidated order %s: no accepted quote items to sync', order.pk)
        elif not created:
            logger.info('Consolidated order %s already up to date', order.pk)
        else:
            logger.info(
                'Consolidated order %s: synced %d new item(s) from %d quote line(s)',
                order.pk, len(created), len(lines),
            )
        return SyncResult(order=order, inserted_items=created, candidate_count=len(lines))

    # ─── Mutations ──────────────────────────────────────────────────────────────

    def update_item_quantity(self, item_id, quantity, distributor):
        """Set an item's quantity and recompute its subtotal."""
        quantity = self._validate_quantity(quantity, item_id=item_id)
        item = self._get_editable_item(item_id, distributor)

        with transaction.atomic():
            self._lock_item_order(item, distributor)
            item.quantity = quantity
            item.save(update_fields=['quantity', 'updated_at'])
        return item

    def remove_item(self, item_id, distributor):
        """Delete an item from its draft."""
        item = self._get_editable_item(item_id, distributor)
        order_id = item.consolidated_order_id

        with transaction.atomic():
            self._lock_item_order(item, distributor)
            item.delete()
        logger.info('Removed item %s from consolidated order %s', item_id, order_id)

    def add_product(self, order_id, item_input, distributor):
        """
        Add a product to a draft by hand.

        If the bucket is already on the draft its quantity is increased by
        the new quantity; otherwise a new item is created.
        """
        quantity = self._validate_quantity(item_input.quantity, order_id=order_id)
        unit_price = self._validate_unit_price(item_input.unit_price, order_id=order_id)
        product_id = self._coerce_uuid(item_input.product_id, 'product_id', order_id)
        variant_id = None
        if item_input.variant_id:
            variant_id = self._coerce_uuid(item_input.variant_id, 'variant_id', order_id)
        if not item_input.product_name:
            raise InvalidArgument(
                "Product name is required.",
                order_id=order_id,
                rule='product_name_required',
            )

        with transaction.atomic():
            order = self._get_editable_order(order_id, distributor, lock=True)
            existing = order.items.filter(product_id=product_id, variant_id=variant_id).first()

            if existing:
                if item_input.source_quote_ids:
                    existing.source_quote_ids = merge_source_ids(
                        existing.source_quote_ids, item_input.source_quote_ids,
                    )
                    existing.save(update_fields=['source_quote_ids', 'updated_at'])
                return self.update_item_quantity(
                    existing.pk, existing.quantity + quantity, distributor,
                )

            try:
                with transaction.atomic():
                    item = ConsolidatedOrderItem.objects.create(
                        consolidated_order=order,
                        product_id=product_id,
                        variant_id=variant_id,
                        product_name=item_input.product_name,
                        product_sku=item_input.product_sku,
                        variant_description=item_input.variant_description,
                        product_image_url=item_input.product_image_url,
                        quantity=quantity,
                        unit_price=unit_price,
                        source_quote_ids=merge_source_ids([], item_input.source_quote_ids),
                    )
            except IntegrityError as exc:
                raise Conflict(
                    "This product was added by another request. Reload the order.",
                    order_id=order_id,
                    product_id=product_id,
                    rule='one_item_per_bucket',
                ) from exc

        logger.info('Added product %s to consolidated order %s', product_id, order_id)
        return item

    def update_notes(self, order_id, notes, distributor):
        """Replace the draft's free-text notes."""
        with transaction.atomic():
            order = self._get_editable_order(order_id, distributor, lock=True)
            order.notes = notes or ''
            order.save(update_fields=['notes', 'updated_at'])
        return order

    def cancel_draft(self, order_id, distributor):
        """Cancel a draft. A new draft can then be opened for the same supplier."""
        with transaction.atomic():
            order = self._get_editable_order(order_id, distributor, lock=True)
            order.status = ConsolidatedOrder.STATUS_CANCELLED
            order.save(update_fields=['status', 'updated_at'])

        logger.info('Cancelled consolidated order %s', order.pk)
        return order

    # ─── Send / Conversion ──────────────────────────────────────────────────────

    def send_order(self, order_id, distributor, notes=None):
        """
        Convert a draft into a pending quote for the supplier and seal it.

        The quote, its items and the status change are written in one
        transaction; any failure leaves the draft untouched and no quote.

        Args:
            order_id: Draft to send
            distributor: Acting distributor (must own the draft)
            notes: Optional notes for the supplier; defaults to the draft's notes

        Returns:
            Quote: The new outbound quote

        Raises:
            NotFound, Forbidden: unknown draft or not the owner
            InvalidState: draft already sealed or has no items
        """
        with transaction.atomic():
            order = self._get_editable_order(order_id, distributor, lock=True)
            items = list(order.items.all())
            if not items:
                raise InvalidState(
                    "Cannot send a consolidated order with no items.",
                    order_id=order.pk,
                    rule='send_requires_items',
                )

            final_notes = order.notes if notes is None else notes
            requester = self._resolve_requester(distributor)

            quote = Quote.objects.create(
                catalog_id=order.source_catalog_id,
                owner_id=order.supplier_id,
                customer_name=requester['name'],
                customer_email=requester['email'],
                customer_company=requester['company'],
                customer_phone=requester['phone'],
                customer_user=distributor,
                notes=self._outbound_notes(final_notes),
                status='pending',
                delivery_method=OUTBOUND_DELIVERY_METHOD,
            )

            QuoteItem.objects.bulk_create([
                QuoteItem(
                    quote=quote,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    product_sku=item.product_sku,
                    variant_description=item.variant_description,
                    product_image_url=item.product_image_url,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                    price_type=OUTBOUND_PRICE_TYPE,
                )
                for item in items
            ])

            order.status = ConsolidatedOrder.STATUS_SENT
            order.linked_quote = quote
            order.sent_at = timezone.now()
            order.notes = final_notes or ''
            order.save(update_fields=['status', 'linked_quote', 'sent_at', 'notes', 'updated_at'])

            transaction.on_commit(partial(
                _broadcast_sent,
                supplier_id=order.supplier_id,
                order_id=order.pk,
                quote_id=quote.pk,
                items_count=len(items),
                total_amount=sum(item.subtotal for item in items),
            ))

        logger.info(
            'Sent consolidated order %s as quote %s (%d item(s))',
            order.pk, quote.pk, len(items),
        )
        return quote

    # ─── Helpers ────────────────────────────────────────────────────────────────

    def _get_owned_order(self, order_id, distributor, lock=False):
        orders = ConsolidatedOrder.objects.all()
        if lock:
            orders = orders.select_for_update()
        order = orders.filter(pk=order_id).first()
        if order is None:
            raise NotFound(
                f"Consolidated order {order_id} not found.",
                order_id=order_id,
            )
        if order.distributor_id != distributor.pk:
            raise Forbidden(
                "You do not have permission to modify this consolidated order.",
                order_id=order_id,
                rule='owner_only',
            )
        return order

    def _get_editable_order(self, order_id, distributor, lock=False):
        order = self._get_owned_order(order_id, distributor, lock=lock)
        if not order.is_editable:
            raise InvalidState(
                f"Only draft orders can be changed; this order is '{order.status}'.",
                order_id=order.pk,
                status=order.status,
                rule='draft_only',
            )
        return order

    def _get_editable_item(self, item_id, distributor):
        item = ConsolidatedOrderItem.objects.select_related('consolidated_order').filter(
            pk=item_id
        ).first()
        if item is None:
            raise NotFound(f"Item {item_id} not found.", item_id=item_id)

        order = item.consolidated_order
        if order.distributor_id != distributor.pk:
            raise Forbidden(
                "You do not have permission to modify this item.",
                item_id=item_id,
                order_id=order.pk,
                rule='owner_only',
            )
        if not order.is_editable:
            raise InvalidState(
                f"Only draft orders can be changed; this order is '{order.status}'.",
                item_id=item_id,
                order_id=order.pk,
                status=order.status,
                rule='draft_only',
            )
        return item

    def _lock_item_order(self, item, distributor):
        """Re-read the item's order under a row lock and check it is still a draft."""
        try:
            return self._get_editable_order(item.consolidated_order_id, distributor, lock=True)
        except InvalidState as exc:
            exc.context['item_id'] = item.pk
            raise

    def _validate_sources(self, distributor, supplier, source_catalog, source_replicated_catalog):
        if source_catalog.owner_id != supplier.pk:
            raise InvalidArgument(
                "The source catalog does not belong to this supplier.",
                catalog_id=source_catalog.pk,
                supplier_id=supplier.pk,
                rule='catalog_owned_by_supplier',
            )
        if source_replicated_catalog.distributor_id != distributor.pk:
            raise InvalidArgument(
                "The replicated catalog does not belong to you.",
                replicated_catalog_id=source_replicated_catalog.pk,
                rule='replica_owned_by_distributor',
            )
        if source_replicated_catalog.original_catalog_id != source_catalog.pk:
            raise InvalidArgument(
                "The replicated catalog is not a copy of the source catalog.",
                replicated_catalog_id=source_replicated_catalog.pk,
                catalog_id=source_catalog.pk,
                rule='replica_of_source_catalog',
            )

    def _validate_quantity(self, quantity, **context):
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidArgument(
                "Quantity must be a whole number.",
                quantity=quantity,
                rule='quantity_integer',
                **context,
            )
        if quantity <= 0:
            raise InvalidArgument(
                "Quantity must be greater than 0.",
                quantity=quantity,
                rule='quantity_positive',
                **context,
            )
        if quantity > MAX_QUANTITY:
            raise InvalidArgument(
                f"Quantity cannot exceed {MAX_QUANTITY}.",
                quantity=quantity,
                rule='quantity_max',
                **context,
            )
        return quantity

    def _validate_unit_price(self, unit_price, **context):
        if isinstance(unit_price, bool) or not isinstance(unit_price, int) or unit_price < 0:
            raise InvalidArgument(
                "Unit price must be a non-negative whole number of minor currency units.",
                unit_price=unit_price,
                rule='unit_price_minor_units',
                **context,
            )
        return unit_price

    def _coerce_uuid(self, value, field_name, order_id):
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(
                f"{field_name} is not a valid identifier.",
                order_id=order_id,
                field=field_name,
                value=value,
                rule='uuid_format',
            ) from exc

    def _resolve_requester(self, distributor):
        profile = BusinessProfile.objects.filter(user=distributor).first()
        return {
            'name': distributor.display_name,
            'email': distributor.email or '',
            'company': profile.business_name if profile else '',
            'phone': distributor.phone or (profile.phone if profile else ''),
        }

    def _outbound_notes(self, notes):
        notes = (notes or '').strip()
        if not notes:
            return OUTBOUND_NOTES_HEADER
        return f"{OUTBOUND_NOTES_HEADER}\n{notes}"

    def _summarize(self, order, business_names=None):
        if business_names is None:
            business_names = dict(
                BusinessProfile.objects.filter(user_id=order.supplier_id)
                .values_list('user_id', 'business_name')
            )
        business_name = business_names.get(order.supplier_id)
        catalog = order.source_catalog
        return DraftSummary(
            order=order,
            items=list(order.items.all()),
            supplier_name=business_name or DEFAULT_SUPPLIER_NAME,
            supplier_business_name=business_name,
            catalog_name=(catalog.name if catalog else None) or DEFAULT_CATALOG_NAME,
        )


def _broadcast_sent(supplier_id, order_id, quote_id, items_count, total_amount):
    from apps.api.ws_signals import broadcast_consolidated_order_sent

    broadcast_consolidated_order_sent(
        supplier_id=supplier_id,
        order_id=order_id,
        quote_id=quote_id,
        data={'items_count': items_count, 'total_amount': total_amount},
    )
