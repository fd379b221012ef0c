"""
Catalog helpers for the search and home pages: picking the right product
query for the search parameters and remembering rendered products so that
add-to-cart can resolve a product id without trusting client-sent prices.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from django.conf import settings
from django.core.cache import cache

from ..entities import Product

logger = logging.getLogger(__name__)

PRODUCT_CACHE_KEY = 'catalog:product:{product_id}'

PRICE_PLANS = (
    {'price': 99, 'subtitle': 'STORE', 'note': 'LIVE NOW'},
    {'price': 199, 'subtitle': 'STORE', 'note': 'LIVE NOW'},
    {'price': 299, 'subtitle': 'STORE', 'note': 'LIVE NOW'},
)

HERO_SLIDES = (
    {'title': "Beauty essentials for every day", 'query': {'category': "Make-up essentials"}},
    {'title': "Gadgets and electronics", 'query': {'category': "Electronics"}},
    {'title': "Birthday gifts and decor", 'query': {'category': "Home decorative items"}},
)

# "Shop by name" tiles, each a product name search
NAME_TILES = (
    "Scrunchies",
    "Nosepin",
    "Clutcher",
    "Sanitary Napkins",
)

FEATURED_CATEGORIES = (
    "Make-up essentials",
    "Skincare",
    "Perfumes",
    "Hair care",
    "Earrings",
    "Electronics",
)


def parse_search_params(query):
    """
    Extracts the product query from GET parameters.

    Returns:
        dict with `name`, `category`, `brand` (stripped strings) and
        `price` (int or None)
    """
    raw_price = (query.get('price') or '').strip()
    try:
        price = int(raw_price) if raw_price else None
    except ValueError:
        price = None
    return {
        'name': (query.get('name') or '').strip(),
        'category': (query.get('category') or '').strip(),
        'brand': (query.get('brand') or '').strip(),
        'price': price,
    }


def has_search(params) -> bool:
    return bool(params['name'] or params['category'] or params['brand'] or params['price'] is not None)


def fetch_products(api, params) -> List[Product]:
    """
    Runs the one product query the parameters call for.

    Precedence: name, then category, then brand, then price. Without any of
    them there is nothing to search and an empty list is returned.

    Raises:
        ApiError: the shop API call failed
    """
    if params['name']:
        return api.search_products_by_name(params['name'])
    if params['category']:
        return api.get_products_by_category(params['category'])
    if params['brand']:
        return api.search_by_brand(params['brand'])
    if params['price'] is not None:
        return api.search_by_price(params['price'])
    return []


def remember_products(products, timeout: Optional[int] = None):
    if not products:
        return
    if timeout is None:
        timeout = getattr(settings, 'CATALOG_CACHE_TIMEOUT', 3600)
    cache.set_many(
        {PRODUCT_CACHE_KEY.format(product_id=p.product_id): p.to_cache() for p in products},
        timeout,
    )


def recall_product(product_id) -> Optional[Product]:
    data = cache.get(PRODUCT_CACHE_KEY.format(product_id=product_id))
    if data is None:
        return None
    try:
        return Product.from_cache(data)
    except (KeyError, TypeError, ValueError, ArithmeticError) as e:
        logger.warning("Dropping unreadable cached product %s: %s", product_id, e)
        cache.delete(PRODUCT_CACHE_KEY.format(product_id=product_id))
        return None
