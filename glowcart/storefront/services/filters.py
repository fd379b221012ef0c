"""
Product filter engine for the search page.

filter_products() narrows a fetched product list by the facets the customer
ticked in the sidebar. Facets are combined with AND; selected categories and
brands are each matched with OR.

The sidebar is a GET form. Its fields are prefixed (`f_category`, `f_brand`)
so they never change which products are fetched; until the form has been
submitted once (`filtered=1`), the search's own `category` / `brand` / `price`
parameters seed the facets.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..entities import Product

DEFAULT_PRICE_CEILING = Decimal('200')

CATEGORY_OPTIONS = (
    "Hair accessories",
    "Make-up essentials",
    "Rings",
    "Hair care",
    "Earrings",
    "Perfumes",
    "Hand-wash",
    "Electronics",
    "Sanitary pads",
    "Hair removal",
    "Skincare",
    "Home decorative items",
    "Kitchen essentials",
    "Oral care",
    "Basic needs",
    "Personal care",
    "Bangles",
)

BRAND_OPTIONS = (
    "LuxeBeauty",
    "ColorPro",
    "SkinLux",
    "Elegance",
    "FlawlessBase",
    "GlossyBeauty",
)

RATING_OPTIONS = (4, 3, 2, 1)


def _parse_decimal(raw, default: Decimal) -> Decimal:
    if raw in (None, ''):
        return default
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return default
    if not value.is_finite() or value < 0:
        return default
    return value


def _parse_rating(raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 0
    return value if 0 <= value <= 5 else 0


@dataclass(frozen=True)
class FilterState:
    categories: FrozenSet[str] = field(default_factory=frozenset)
    brands: FrozenSet[str] = field(default_factory=frozenset)
    price_range: Tuple[Decimal, Decimal] = (Decimal('0'), DEFAULT_PRICE_CEILING)
    min_rating: int = 0
    in_stock: bool = False
    price_ceiling: Decimal = DEFAULT_PRICE_CEILING

    @classmethod
    def from_query(cls, query, default_max: Optional[Decimal] = None) -> "FilterState":
        """
        Builds the filter state from a request's GET parameters.

        Unparseable numbers fall back to the defaults; a reversed price range
        is swapped.
        """
        ceiling = default_max if default_max is not None else DEFAULT_PRICE_CEILING
        upper_default = _parse_decimal(query.get('price'), ceiling)

        if query.get('filtered') == '1':
            categories = query.getlist('f_category')
            brands = query.getlist('f_brand')
        else:
            categories = [query.get('category', '').strip()]
            brands = [query.get('brand', '').strip()]

        min_price = _parse_decimal(query.get('min_price'), Decimal('0'))
        max_price = _parse_decimal(query.get('max_price'), upper_default)
        if min_price > max_price:
            min_price, max_price = max_price, min_price

        return cls(
            categories=frozenset(v for v in categories if v),
            brands=frozenset(v for v in brands if v),
            price_range=(min_price, max_price),
            min_rating=_parse_rating(query.get('rating')),
            in_stock=query.get('in_stock') in ('1', 'true', 'on', 'yes'),
            price_ceiling=ceiling,
        )

    @property
    def active_count(self) -> int:
        low, high = self.price_range
        return (
            len(self.categories)
            + len(self.brands)
            + (1 if self.min_rating > 0 else 0)
            + (1 if self.in_stock else 0)
            + (1 if low > 0 or high < self.price_ceiling else 0)
        )

    def cleared(self) -> "FilterState":
        return FilterState(
            price_range=(Decimal('0'), self.price_ceiling),
            price_ceiling=self.price_ceiling,
        )

    def to_query(self) -> Dict[str, object]:
        """GET parameters that reproduce this state (for urlencode(doseq=True))."""
        low, high = self.price_range
        query = {
            'filtered': '1',
            'f_category': sorted(self.categories),
            'f_brand': sorted(self.brands),
            'min_price': str(low),
            'max_price': str(high),
        }
        if self.min_rating:
            query['rating'] = str(self.min_rating)
        if self.in_stock:
            query['in_stock'] = '1'
        return query


def filter_products(products: Iterable[Product], filters: FilterState) -> List[Product]:
    """
    Returns the products matching every active facet, in input order.

    - category: skipped when no category is selected
    - brand: skipped when no brand is selected
    - price: always applied, bounds inclusive
    - rating: skipped when the threshold is 0
    - stock: skipped unless in-stock-only is set
    """
    low, high = filters.price_range
    result = []
    for product in products:
        if filters.categories and (product.category or '') not in filters.categories:
            continue
        if filters.brands and (product.brand or '') not in filters.brands:
            continue
        if not (low <= product.price <= high):
            continue
        if filters.min_rating > 0 and product.rating < filters.min_rating:
            continue
        if filters.in_stock and not product.stock:
            continue
        result.append(product)
    return result
