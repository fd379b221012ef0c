"""
Storefront views package.

Структура:
- utils.py - helpers shared by the view modules
- catalog.py - home page and product search
- cart.py - cart page and cart mutations
- checkout.py - checkout form, order placement, confirmation
- auth.py - login, logout, profile
- static_pages.py - blog
"""

from .utils import get_shop_api

from .catalog import (
    home,
    search,
)

from .cart import (
    view_cart,
    add_to_cart,
    update_cart,
    remove_from_cart,
    clear_cart,
    get_cart_count,
)

from .checkout import (
    checkout,
    order_success,
)

from .auth import (
    login_view,
    logout_view,
    profile_view,
)

from .static_pages import blog
