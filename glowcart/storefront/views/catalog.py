"""
Catalog views: home page and product search.

Products come from the shop API; the search page narrows them with the
filter engine on every request.
"""
import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.shortcuts import render
from django.urls import reverse

from ..services.api import ApiError
from ..services.catalog import (
    FEATURED_CATEGORIES,
    HERO_SLIDES,
    NAME_TILES,
    PRICE_PLANS,
    fetch_products,
    has_search,
    parse_search_params,
    remember_products,
)
from ..services.filters import (
    BRAND_OPTIONS,
    CATEGORY_OPTIONS,
    RATING_OPTIONS,
    FilterState,
    filter_products,
)
from .static_pages import BLOG_POSTS
from .utils import get_shop_api

logger = logging.getLogger(__name__)


# ==================== CATALOG VIEWS ====================

def home(request):
    """
    Главная страница.

    Context:
        hero_slides: rotating banner, each slide linking to a search
        price_plans: "store under N" tiles linking to a price search
        categories: featured categories linking to a category search
        name_tiles: "shop by name" tiles linking to a name search
        brands: brand carousel
        blog_posts: blog teasers
    """
    search_url = reverse('search')
    return render(
        request,
        'storefront/pages/index.html',
        {
            'hero_slides': [
                {'title': slide['title'], 'url': f"{search_url}?{urlencode(slide['query'])}"}
                for slide in HERO_SLIDES
            ],
            'price_plans': [
                {**plan, 'url': f"{search_url}?{urlencode({'price': plan['price']})}"}
                for plan in PRICE_PLANS
            ],
            'categories': [
                {'name': name, 'url': f"{search_url}?{urlencode({'category': name})}"}
                for name in FEATURED_CATEGORIES
            ],
            'name_tiles': [
                {'name': name, 'url': f"{search_url}?{urlencode({'name': name})}"}
                for name in NAME_TILES
            ],
            'brands': [
                {'name': name, 'url': f"{search_url}?{urlencode({'brand': name})}"}
                for name in BRAND_OPTIONS
            ],
            'blog_posts': BLOG_POSTS,
        },
    )


def search(request):
    """
    Поиск и фильтрация товаров.

    GET params:
        name / category / brand / price: product query (first present wins)
        filtered, f_category, f_brand, min_price, max_price, rating, in_stock:
            sidebar filters

    Context:
        products: filtered products
        total_found: number of products fetched before filtering
        filters: FilterState
        active_filters_count: badge on "Clear all"
    """
    params = parse_search_params(request.GET)
    filters = FilterState.from_query(
        request.GET,
        default_max=getattr(settings, 'STOREFRONT_PRICE_CEILING', None),
    )

    all_products = []
    if has_search(params):
        try:
            all_products = fetch_products(get_shop_api(), params)
        except ApiError as e:
            logger.error("Error fetching products for %s: %s", params, e.message)
            messages.error(request, e.message)
        remember_products(all_products)

    products = filter_products(all_products, filters)

    search_params = {key: value for key, value in params.items() if value not in ('', None)}
    clear_query = {**search_params, **filters.cleared().to_query()}

    return render(
        request,
        'storefront/pages/search.html',
        {
            'products': products,
            'total_found': len(all_products),
            'search': params,
            'search_params': search_params,
            'has_search': has_search(params),
            'filters': filters,
            'active_filters_count': filters.active_count,
            'clear_filters_url': f"{reverse('search')}?{urlencode(clear_query, doseq=True)}",
            'category_options': CATEGORY_OPTIONS,
            'brand_options': BRAND_OPTIONS,
            'rating_options': RATING_OPTIONS,
            'cart_product_ids': set(request.cart.product_ids),
        },
    )
