"""
Unit tests for the product filter engine (services/filters.py).
"""
from decimal import Decimal

from django.http import QueryDict
from django.test import SimpleTestCase

from storefront.entities import Product
from storefront.services.filters import FilterState, filter_products


def make_product(product_id, price, category='', brand='', rating=0.0, stock=True):
    return Product(
        product_id=str(product_id),
        name=f"Product {product_id}",
        price=Decimal(str(price)),
        category=category,
        brand=brand,
        rating=rating,
        stock=stock,
    )


class FilterProductsTests(SimpleTestCase):
    """Tests for filter_products."""

    def setUp(self):
        self.products = [
            make_product(1, 50, category='A', brand='LuxeBeauty', rating=4.5, stock=True),
            make_product(2, 150, category='B', brand='ColorPro', rating=2.0, stock=False),
            make_product(3, 20, category='A', brand='ColorPro', rating=3.2, stock=True),
        ]

    def test_empty_state_returns_everything(self):
        result = filter_products(self.products, FilterState())
        self.assertEqual(result, self.products)

    def test_category_filter(self):
        products = self.products[:2]
        result = filter_products(products, FilterState(categories=frozenset({'A'})))
        self.assertEqual([p.product_id for p in result], ['1'])

    def test_categories_are_or_combined(self):
        state = FilterState(categories=frozenset({'A', 'B'}))
        self.assertEqual(len(filter_products(self.products, state)), 3)

    def test_facets_are_and_combined(self):
        state = FilterState(categories=frozenset({'A'}), brands=frozenset({'ColorPro'}))
        result = filter_products(self.products, state)
        self.assertEqual([p.product_id for p in result], ['3'])

    def test_price_bounds_are_inclusive(self):
        state = FilterState(price_range=(Decimal('20'), Decimal('50')))
        result = filter_products(self.products, state)
        self.assertEqual([p.product_id for p in result], ['1', '3'])

    def test_min_rating(self):
        state = FilterState(min_rating=3)
        result = filter_products(self.products, state)
        self.assertEqual([p.product_id for p in result], ['1', '3'])

    def test_in_stock_only(self):
        state = FilterState(in_stock=True)
        result = filter_products(self.products, state)
        self.assertNotIn('2', [p.product_id for p in result])

    def test_filtering_is_idempotent(self):
        state = FilterState(brands=frozenset({'ColorPro'}), min_rating=1)
        once = filter_products(self.products, state)
        self.assertEqual(filter_products(once, state), once)

    def test_preserves_input_order(self):
        reversed_products = list(reversed(self.products))
        result = filter_products(reversed_products, FilterState())
        self.assertEqual(result, reversed_products)


class FilterStateTests(SimpleTestCase):
    """Tests for FilterState parsing and query rendering."""

    def test_defaults(self):
        state = FilterState.from_query(QueryDict(''))
        self.assertEqual(state.price_range, (Decimal('0'), Decimal('200')))
        self.assertEqual(state.active_count, 0)

    def test_seeded_from_search_params_before_submit(self):
        state = FilterState.from_query(QueryDict('category=Skincare&brand=SkinLux&price=99'))
        self.assertEqual(state.categories, frozenset({'Skincare'}))
        self.assertEqual(state.brands, frozenset({'SkinLux'}))
        self.assertEqual(state.price_range, (Decimal('0'), Decimal('99')))

    def test_sidebar_params_win_after_submit(self):
        query = QueryDict('category=Skincare&filtered=1&f_category=Rings&f_category=Bangles')
        state = FilterState.from_query(query)
        self.assertEqual(state.categories, frozenset({'Rings', 'Bangles'}))

    def test_reversed_price_range_is_swapped(self):
        state = FilterState.from_query(QueryDict('min_price=120&max_price=30'))
        self.assertEqual(state.price_range, (Decimal('30'), Decimal('120')))

    def test_garbage_values_fall_back_to_defaults(self):
        state = FilterState.from_query(QueryDict('min_price=abc&max_price=-5&rating=9'))
        self.assertEqual(state.price_range, (Decimal('0'), Decimal('200')))
        self.assertEqual(state.min_rating, 0)

    def test_active_count(self):
        state = FilterState.from_query(
            QueryDict('filtered=1&f_brand=ColorPro&rating=4&in_stock=1&max_price=100')
        )
        self.assertEqual(state.active_count, 4)

    def test_cleared_keeps_ceiling(self):
        state = FilterState(min_rating=4, in_stock=True, price_ceiling=Decimal('500'))
        cleared = state.cleared()
        self.assertEqual(cleared.active_count, 0)
        self.assertEqual(cleared.price_range, (Decimal('0'), Decimal('500')))

    def test_to_query_round_trips_through_from_query(self):
        state = FilterState(
            categories=frozenset({'Rings'}),
            min_rating=2,
            in_stock=True,
            price_range=(Decimal('10'), Decimal('90')),
        )
        query = QueryDict(mutable=True)
        for key, value in state.to_query().items():
            if isinstance(value, list):
                query.setlist(key, value)
            else:
                query[key] = value
        self.assertEqual(FilterState.from_query(query), state)
