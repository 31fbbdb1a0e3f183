# apps/api/v1/views/consolidation.py
"""
ViewSets for consolidated orders and their items.

The authenticated user is always the acting distributor. Business rules live
in ConsolidatedOrderService; its errors are turned into HTTP responses by
apps.api.exceptions.consolidation_exception_handler.
"""
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema

from apps.consolidation.exceptions import InvalidArgument, NotFound
from apps.consolidation.services import ConsolidatedOrderService
from apps.api.v1.serializers.consolidation import (
    ConsolidatedOrderItemSerializer,
    DraftCreateSerializer,
    DraftSummarySerializer,
    ItemAddSerializer,
    ItemQuantitySerializer,
    NotesSerializer,
    QuoteSerializer,
    SendOrderSerializer,
    SyncResultSerializer,
)


def _supplier_param(request, required=False):
    """Read the `supplier` query parameter as a user id."""
    raw = request.query_params.get('supplier')
    if not raw:
        if required:
            raise InvalidArgument("The 'supplier' query parameter is required.", field='supplier')
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument("'supplier' must be a user id.", field='supplier', value=raw)


class ConsolidatedOrderViewSet(viewsets.ViewSet):
    """
    Consolidated orders owned by the current distributor.

    One open draft per supplier collects the demand of accepted customer
    quotes; sending it creates a pending quote for the supplier.
    """
    lookup_value_regex = r"\d+"

    def get_service(self):
        return ConsolidatedOrderService()

    def _summary_response(self, order, status_code=status.HTTP_200_OK):
        summary = self.get_service().get_order(order.pk, self.request.user)
        return Response(DraftSummarySerializer(summary).data, status=status_code)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='List consolidated orders',
        parameters=[
            OpenApiParameter('status', OpenApiTypes.STR, description='draft, sent or cancelled'),
            OpenApiParameter('supplier', OpenApiTypes.INT, description='Supplier user id'),
        ],
        responses={200: DraftSummarySerializer(many=True)},
    )
    def list(self, request):
        summaries = self.get_service().list_drafts(
            request.user,
            status=request.query_params.get('status') or None,
            supplier=_supplier_param(request),
        )
        return Response(DraftSummarySerializer(summaries, many=True).data)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Get or create the open draft for a supplier',
        request=DraftCreateSerializer,
        responses={200: DraftSummarySerializer, 201: DraftSummarySerializer},
    )
    def create(self, request):
        serializer = DraftCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().get_or_create_draft(
            distributor=request.user,
            supplier=serializer.validated_data['supplier'],
            source_catalog=serializer.validated_data['source_catalog'],
            source_replicated_catalog=serializer.validated_data['source_replicated_catalog'],
        )
        return self._summary_response(
            result.order,
            status.HTTP_201_CREATED if result.is_new else status.HTTP_200_OK,
        )

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Get consolidated order details',
        responses={200: DraftSummarySerializer},
    )
    def retrieve(self, request, pk=None):
        summary = self.get_service().get_order(pk, request.user)
        return Response(DraftSummarySerializer(summary).data)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Get the open draft for a supplier',
        parameters=[OpenApiParameter('supplier', OpenApiTypes.INT, required=True)],
        responses={200: DraftSummarySerializer},
    )
    @action(detail=False, methods=['get'], url_path='for-supplier')
    def for_supplier(self, request):
        supplier_id = _supplier_param(request, required=True)
        summary = self.get_service().get_draft_for_supplier(request.user, supplier_id)
        if summary is None:
            raise NotFound(
                "No open consolidated order for this supplier.",
                supplier_id=supplier_id,
            )
        return Response(DraftSummarySerializer(summary).data)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Add items from newly accepted quotes',
        request=None,
        responses={200: SyncResultSerializer},
    )
    @action(detail=True, methods=['post'])
    def sync(self, request, pk=None):
        result = self.get_service().sync_draft(pk, request.user)
        return Response(SyncResultSerializer(result).data)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Add a product to a draft',
        request=ItemAddSerializer,
        responses={201: ConsolidatedOrderItemSerializer},
    )
    @action(detail=True, methods=['post'])
    def items(self, request, pk=None):
        serializer = ItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.get_service().add_product(pk, serializer.to_item_input(), request.user)
        return Response(ConsolidatedOrderItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Replace draft notes',
        request=NotesSerializer,
        responses={200: DraftSummarySerializer},
    )
    @action(detail=True, methods=['patch'])
    def notes(self, request, pk=None):
        serializer = NotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.get_service().update_notes(pk, serializer.validated_data['notes'], request.user)
        return self._summary_response(order)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Send a draft to the supplier as a quote',
        request=SendOrderSerializer,
        responses={201: QuoteSerializer},
    )
    @action(detail=True, methods=['post'])
    def send(self, request, pk=None):
        serializer = SendOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quote = self.get_service().send_order(
            pk, request.user, notes=serializer.validated_data.get('notes'),
        )
        return Response(QuoteSerializer(quote).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Cancel a draft',
        request=None,
        responses={200: DraftSummarySerializer},
    )
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        order = self.get_service().cancel_draft(pk, request.user)
        return self._summary_response(order)


class ConsolidatedOrderItemViewSet(viewsets.ViewSet):
    """Quantity changes and removal of single draft items."""
    lookup_value_regex = r"\d+"

    @extend_schema(
        tags=['consolidated-orders'],
        summary='Change an item quantity',
        request=ItemQuantitySerializer,
        responses={200: ConsolidatedOrderItemSerializer},
    )
    def partial_update(self, request, pk=None):
        serializer = ItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = ConsolidatedOrderService().update_item_quantity(
            pk, serializer.validated_data['quantity'], request.user,
        )
        return Response(ConsolidatedOrderItemSerializer(item).data)

    @extend_schema(tags=['consolidated-orders'], summary='Remove an item from a draft')
    def destroy(self, request, pk=None):
        ConsolidatedOrderService().remove_item(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
