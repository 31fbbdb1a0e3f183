from django.test import SimpleTestCase

from apps.consolidation.aggregation import QuoteLine, aggregate_quote_lines, merge_source_ids
from apps.consolidation.tests.base import PRODUCT_X, PRODUCT_Y, VARIANT_RED


def line(quote_id, product_id, quantity, unit_price=1000, variant_id=None, **extra):
    return QuoteLine(
        quote_id=quote_id,
        product_id=product_id,
        variant_id=variant_id,
        product_name=extra.pop('product_name', 'Widget'),
        quantity=quantity,
        unit_price=unit_price,
        **extra,
    )


class AggregateQuoteLinesTests(SimpleTestCase):
    """Tests for grouping quote lines into buckets."""

    def test_empty_input(self):
        self.assertEqual(aggregate_quote_lines([]), [])

    def test_sums_quantities_per_bucket(self):
        buckets = aggregate_quote_lines([
            line(1, PRODUCT_X, 2),
            line(2, PRODUCT_X, 3),
            line(2, PRODUCT_Y, 1, unit_price=2000),
        ])

        self.assertEqual(len(buckets), 2)
        x, y = buckets
        self.assertEqual(x.product_id, PRODUCT_X)
        self.assertEqual(x.total_quantity, 5)
        self.assertEqual(x.subtotal, 5000)
        self.assertEqual(x.source_quote_ids, [1, 2])
        self.assertEqual(y.total_quantity, 1)
        self.assertEqual(y.subtotal, 2000)
        self.assertEqual(y.source_quote_ids, [2])

    def test_missing_variant_is_its_own_bucket(self):
        buckets = aggregate_quote_lines([
            line(1, PRODUCT_X, 1),
            line(1, PRODUCT_X, 4, variant_id=VARIANT_RED),
            line(2, PRODUCT_X, 2),
        ])

        self.assertEqual(
            [(b.bucket_key, b.total_quantity) for b in buckets],
            [((PRODUCT_X, None), 3), ((PRODUCT_X, VARIANT_RED), 4)],
        )

    def test_quote_ids_listed_once(self):
        buckets = aggregate_quote_lines([
            line(7, PRODUCT_X, 1),
            line(7, PRODUCT_X, 1),
            line(3, PRODUCT_X, 1),
        ])

        self.assertEqual(buckets[0].source_quote_ids, [7, 3])
        self.assertEqual(buckets[0].total_quantity, 3)

    def test_first_line_wins_for_display_fields(self):
        buckets = aggregate_quote_lines([
            line(1, PRODUCT_X, 1, unit_price=900, product_name='First', product_sku='SKU-1'),
            line(2, PRODUCT_X, 1, unit_price=1100, product_name='Second', product_sku='SKU-2'),
        ])

        bucket = buckets[0]
        self.assertEqual(bucket.product_name, 'First')
        self.assertEqual(bucket.product_sku, 'SKU-1')
        self.assertEqual(bucket.unit_price, 900)
        self.assertEqual(bucket.subtotal, 1800)

    def test_first_present_image_is_kept(self):
        buckets = aggregate_quote_lines([
            line(1, PRODUCT_X, 1, product_image_url=''),
            line(2, PRODUCT_X, 1, product_image_url='https://img.test/x.png'),
            line(3, PRODUCT_X, 1, product_image_url='https://img.test/other.png'),
        ])

        self.assertEqual(buckets[0].product_image_url, 'https://img.test/x.png')

    def test_buckets_in_first_seen_order(self):
        buckets = aggregate_quote_lines([
            line(1, PRODUCT_Y, 1),
            line(2, PRODUCT_X, 1),
            line(3, PRODUCT_Y, 1),
        ])

        self.assertEqual([b.product_id for b in buckets], [PRODUCT_Y, PRODUCT_X])


class MergeSourceIdsTests(SimpleTestCase):

    def test_union_keeps_existing_order(self):
        self.assertEqual(merge_source_ids([3, 1], [1, 5, 3, 9]), [3, 1, 5, 9])

    def test_handles_empty_values(self):
        self.assertEqual(merge_source_ids(None, [2]), [2])
        self.assertEqual(merge_source_ids([4], None), [4])
