"""
Helpers shared by the storefront view modules.
"""
from django.http import JsonResponse

from ..services.api import ShopApiClient


def get_shop_api():
    """Shop API client configured from settings."""
    return ShopApiClient()


def wants_json(request):
    """True for fetch()/XHR calls that expect a JSON answer instead of a redirect."""
    accept = request.headers.get('Accept', '')
    return (
        request.headers.get('X-Requested-With') == 'XMLHttpRequest'
        or 'application/json' in accept
    )


def cart_payload(cart):
    """Cart totals in the shape the header badge and cart page scripts expect."""
    summary = cart.get_summary()
    return {
        'count': cart.get_count(),
        'subtotal': float(summary.subtotal),
        'tax': float(summary.tax),
        'shipping': float(summary.shipping),
        'total': float(summary.total),
    }


def json_error(message, status=400, **extra):
    return JsonResponse({'success': False, 'message': message, **extra}, status=status)


def client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '')
