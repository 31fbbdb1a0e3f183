from unittest import mock

from rest_framework import status
from rest_framework.test import APIClient

from apps.consolidation.models import ConsolidatedOrder
from apps.consolidation.tests.base import ConsolidationTestCase, PRODUCT_X, PRODUCT_Y, PRODUCT_Z

BASE_URL = '/api/v1/consolidated-orders/'
ITEMS_URL = '/api/v1/consolidated-order-items/'


class ConsolidatedOrderAPITestCase(ConsolidationTestCase):

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.distributor)

    def create_draft(self):
        return self.client.post(BASE_URL, {
            'supplier': self.supplier.pk,
            'source_catalog': self.catalog.pk,
            'source_replicated_catalog': self.replica.pk,
        }, format='json')

    def item_id(self, data, product_id):
        return next(i['id'] for i in data['items'] if i['product_id'] == str(product_id))


class DraftEndpointTests(ConsolidatedOrderAPITestCase):

    def test_requires_authentication(self):
        response = APIClient().get(BASE_URL)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_then_get_existing(self):
        self.make_scenario_quotes()

        response = self.create_draft()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(response.data['items_count'], 2)
        self.assertEqual(response.data['total_amount'], 7000)
        self.assertEqual(response.data['source_quotes_count'], 2)
        self.assertEqual(response.data['supplier_name'], 'Acme Wholesale')

        again = self.create_draft()
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(again.data['id'], response.data['id'])

    def test_create_with_mismatched_catalog(self):
        response = self.client.post(BASE_URL, {
            'supplier': self.supplier.pk,
            'source_catalog': self.catalog.pk,
            'source_replicated_catalog': self.other_replica.pk,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_argument')
        self.assertEqual(response.data['detail']['rule'], 'replica_owned_by_distributor')

    def test_list_and_retrieve(self):
        self.make_scenario_quotes()
        order_id = self.create_draft().data['id']

        listing = self.client.get(BASE_URL, {'status': 'draft'})
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual([o['id'] for o in listing.data], [order_id])

        detail = self.client.get(f'{BASE_URL}{order_id}/')
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(len(detail.data['items']), 2)
        x = next(i for i in detail.data['items'] if i['product_id'] == str(PRODUCT_X))
        self.assertEqual(x['quantity'], 5)
        self.assertEqual(x['subtotal'], 5000)

    def test_list_unknown_status(self):
        response = self.client.get(BASE_URL, {'status': 'archived'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_for_supplier(self):
        missing = self.client.get(f'{BASE_URL}for-supplier/', {'supplier': self.supplier.pk})
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

        order_id = self.create_draft().data['id']
        found = self.client.get(f'{BASE_URL}for-supplier/', {'supplier': self.supplier.pk})
        self.assertEqual(found.status_code, status.HTTP_200_OK)
        self.assertEqual(found.data['id'], order_id)

        bad = self.client.get(f'{BASE_URL}for-supplier/', {'supplier': 'abc'})
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_order(self):
        response = self.client.get(f'{BASE_URL}999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_sync(self):
        self.make_scenario_quotes()
        order_id = self.create_draft().data['id']
        self.make_quote([(PRODUCT_Z, None, 2, 100)])

        response = self.client.post(f'{BASE_URL}{order_id}/sync/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['inserted_count'], 1)
        self.assertEqual(response.data['inserted_items'][0]['product_id'], str(PRODUCT_Z))

    def test_cancel(self):
        order_id = self.create_draft().data['id']

        response = self.client.post(f'{BASE_URL}{order_id}/cancel/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        self.assertEqual(self.create_draft().status_code, status.HTTP_201_CREATED)


class ItemEndpointTests(ConsolidatedOrderAPITestCase):

    def setUp(self):
        super().setUp()
        self.make_scenario_quotes()
        self.draft = self.create_draft().data
        self.order_id = self.draft['id']

    def test_add_product(self):
        response = self.client.post(f'{BASE_URL}{self.order_id}/items/', {
            'product_id': str(PRODUCT_Z),
            'product_name': 'Gizmo',
            'quantity': 3,
            'unit_price': 250,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['subtotal'], 750)

    def test_add_product_merges_bucket(self):
        response = self.client.post(f'{BASE_URL}{self.order_id}/items/', {
            'product_id': str(PRODUCT_Y),
            'product_name': 'Widget',
            'quantity': 4,
            'unit_price': 2000,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['id'], self.item_id(self.draft, PRODUCT_Y))
        self.assertEqual(response.data['quantity'], 5)
        self.assertEqual(response.data['subtotal'], 10000)

    def test_add_product_rejects_zero_quantity(self):
        response = self.client.post(f'{BASE_URL}{self.order_id}/items/', {
            'product_id': str(PRODUCT_Z),
            'product_name': 'Gizmo',
            'quantity': 0,
            'unit_price': 250,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_quantity(self):
        item_id = self.item_id(self.draft, PRODUCT_X)

        response = self.client.patch(f'{ITEMS_URL}{item_id}/', {'quantity': 9}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 9)
        self.assertEqual(response.data['subtotal'], 9000)

    def test_update_quantity_out_of_range(self):
        item_id = self.item_id(self.draft, PRODUCT_X)

        response = self.client.patch(f'{ITEMS_URL}{item_id}/', {'quantity': 2147483648}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_remove_item(self):
        item_id = self.item_id(self.draft, PRODUCT_X)

        response = self.client.delete(f'{ITEMS_URL}{item_id}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        detail = self.client.get(f'{BASE_URL}{self.order_id}/')
        self.assertEqual(detail.data['items_count'], 1)

    def test_update_notes(self):
        response = self.client.patch(
            f'{BASE_URL}{self.order_id}/notes/', {'notes': 'Ring twice'}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], 'Ring twice')

    def test_send(self):
        with mock.patch('apps.api.ws_signals.broadcast_consolidated_order_sent'):
            response = self.client.post(
                f'{BASE_URL}{self.order_id}/send/', {'notes': 'Friday'}, format='json',
            )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['owner'], self.supplier.pk)
        self.assertEqual(len(response.data['items']), 2)
        self.assertTrue(all(i['price_type'] == 'wholesale' for i in response.data['items']))

        order = ConsolidatedOrder.objects.get(pk=self.order_id)
        self.assertEqual(order.status, ConsolidatedOrder.STATUS_SENT)
        self.assertEqual(order.linked_quote_id, response.data['id'])

        again = self.client.post(f'{BASE_URL}{self.order_id}/send/', {}, format='json')
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(again.data['code'], 'invalid_state')

        item_id = self.item_id(self.draft, PRODUCT_X)
        edit = self.client.patch(f'{ITEMS_URL}{item_id}/', {'quantity': 2}, format='json')
        self.assertEqual(edit.status_code, status.HTTP_409_CONFLICT)

    def test_duplicate_open_draft_conflict(self):
        with mock.patch(
            'apps.consolidation.services.ConsolidatedOrderService.get_open_draft',
            return_value=None,
        ):
            response = self.create_draft()

        # With the lookup bypassed the database still refuses a second draft
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'conflict')
