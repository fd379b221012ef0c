def cart_context(request):
    """
    Контекстный процессор: количество товаров в корзине для бейджа в шапке.
    """
    cart = getattr(request, 'cart', None)
    return {
        'cart_count': cart.get_count() if cart is not None else 0,
    }


def session_user(request):
    """
    Контекстный процессор: данные покупателя из JWT для шапки.
    """
    auth = getattr(request, 'auth', None)
    user = auth.user if auth is not None else None
    return {
        'session_user': user,
        'is_logged_in': user is not None,
    }
