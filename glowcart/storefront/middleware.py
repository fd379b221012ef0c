"""
Middleware that puts the session-scoped stores on the request.
"""
from .services.auth import SessionAuth
from .services.cart import CartStore

SESSION_CART_KEY = 'cart'


def save_cart_to_session(request, cart):
    request.session[SESSION_CART_KEY] = cart.to_session()
    request.session.modified = True


class CartMiddleware:
    """
    Builds `request.cart` (CartStore) and `request.auth` (SessionAuth) from
    the session. Every cart change is written back to the session through a
    subscription, so views never touch the session layout directly.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        cart = CartStore.from_session(request.session.get(SESSION_CART_KEY))
        cart.subscribe(lambda store: save_cart_to_session(request, store))
        request.cart = cart
        request.auth = SessionAuth(request.session)
        return self.get_response(request)
