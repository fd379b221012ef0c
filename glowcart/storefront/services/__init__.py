"""
Storefront services: shop API client, cart store, filter engine, checkout.
"""

from .api import ApiError, ApiSchemaError, ShopApiClient
from .auth import SessionAuth
from .cart import CartItem, CartStore, OrderSummary, summarize
from .checkout import (
    CheckoutCoordinator,
    CheckoutResult,
    CheckoutState,
    OrderRequest,
    ShippingDetails,
)
from .filters import FilterState, filter_products

__all__ = [
    "ApiError",
    "ApiSchemaError",
    "ShopApiClient",
    "SessionAuth",
    "CartItem",
    "CartStore",
    "OrderSummary",
    "summarize",
    "CheckoutCoordinator",
    "CheckoutResult",
    "CheckoutState",
    "OrderRequest",
    "ShippingDetails",
    "FilterState",
    "filter_products",
]
