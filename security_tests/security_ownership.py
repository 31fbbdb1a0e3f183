"""
Security tests for consolidated order ownership.

Consolidated orders carry a distributor's purchasing plan and the prices it
pays its supplier. One distributor must never be able to read, change or
send another distributor's order, through the service layer or the API.

Any failure in these tests represents a CRITICAL data exposure.
"""
import pytest
from rest_framework import status
from rest_framework.test import APIClient

from apps.consolidation.exceptions import Forbidden
from apps.consolidation.models import ConsolidatedOrder
from apps.consolidation.services import ConsolidatedOrderService, ItemInput
from apps.consolidation.tests.base import ConsolidationTestCase, PRODUCT_X, PRODUCT_Z
from apps.quotes.models import Quote


@pytest.mark.security
@pytest.mark.ownership
class ConsolidatedOrderOwnershipTests(ConsolidationTestCase):
    """
    Simulate a second distributor probing the first distributor's draft.
    """

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.make_scenario_quotes()
        result = ConsolidatedOrderService().get_or_create_draft(
            distributor=cls.distributor,
            supplier=cls.supplier,
            source_catalog=cls.catalog,
            source_replicated_catalog=cls.replica,
        )
        cls.order = result.order
        cls.item = cls.order.items.get(product_id=PRODUCT_X, variant_id=None)

    def setUp(self):
        self.service = ConsolidatedOrderService()
        self.attacker = APIClient()
        self.attacker.force_authenticate(user=self.other_distributor)

    def assert_untouched(self):
        self.order.refresh_from_db()
        self.item.refresh_from_db()
        self.assertEqual(self.order.status, ConsolidatedOrder.STATUS_DRAFT)
        self.assertEqual(self.order.notes, '')
        self.assertEqual(self.order.items.count(), 2)
        self.assertEqual(self.item.quantity, 5)
        self.assertFalse(Quote.objects.filter(owner=self.supplier).exists())

    # ─── Service layer ──────────────────────────────────────────────────────────

    def test_service_rejects_foreign_distributor(self):
        """Every entry point checks the caller against the order's owner."""
        attacker = self.other_distributor
        operations = [
            lambda: self.service.get_order(self.order.pk, attacker),
            lambda: self.service.sync_draft(self.order.pk, attacker),
            lambda: self.service.update_item_quantity(self.item.pk, 99, attacker),
            lambda: self.service.remove_item(self.item.pk, attacker),
            lambda: self.service.add_product(
                self.order.pk,
                ItemInput(product_id=PRODUCT_Z, product_name='Injected', quantity=1, unit_price=1),
                attacker,
            ),
            lambda: self.service.update_notes(self.order.pk, 'owned', attacker),
            lambda: self.service.cancel_draft(self.order.pk, attacker),
            lambda: self.service.send_order(self.order.pk, attacker),
        ]
        for operation in operations:
            with self.assertRaises(Forbidden):
                operation()

        self.assert_untouched()

    def test_foreign_drafts_not_listed(self):
        self.assertEqual(self.service.list_drafts(self.other_distributor), [])
        self.assertIsNone(self.service.get_draft_for_supplier(self.other_distributor, self.supplier))

    # ─── API ────────────────────────────────────────────────────────────────────

    def test_api_rejects_foreign_distributor(self):
        base = f'/api/v1/consolidated-orders/{self.order.pk}/'
        item_url = f'/api/v1/consolidated-order-items/{self.item.pk}/'
        requests = [
            ('get', base, None),
            ('post', f'{base}sync/', {}),
            ('post', f'{base}items/', {
                'product_id': str(PRODUCT_Z), 'product_name': 'Injected',
                'quantity': 1, 'unit_price': 1,
            }),
            ('patch', f'{base}notes/', {'notes': 'owned'}),
            ('post', f'{base}send/', {}),
            ('post', f'{base}cancel/', {}),
            ('patch', item_url, {'quantity': 99}),
            ('delete', item_url, None),
        ]
        for method, url, payload in requests:
            with self.subTest(method=method, url=url):
                response = getattr(self.attacker, method)(url, payload, format='json')
                self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
                self.assertEqual(response.data['code'], 'forbidden')

        self.assert_untouched()

    def test_api_listing_is_scoped(self):
        response = self.attacker.get('/api/v1/consolidated-orders/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_api_for_supplier_is_scoped(self):
        response = self.attacker.get(
            '/api/v1/consolidated-orders/for-supplier/', {'supplier': self.supplier.pk},
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unauthenticated_rejected(self):
        response = APIClient().get(f'/api/v1/consolidated-orders/{self.order.pk}/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
