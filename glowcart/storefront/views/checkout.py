"""
Checkout views: shipping form, order placement and confirmation.

The order itself is placed by CheckoutCoordinator; these views only translate
its results into messages and redirects.
"""
import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.cache import never_cache

from ..forms import ShippingForm
from ..services.api import ApiError
from ..services.checkout import (
    PAYMENT_METHODS,
    CheckoutCoordinator,
    ShippingDetails,
    delivery_region,
    region_warning,
)
from ..services.geolocation import BrowserLocation, IpGeolocator
from .utils import client_ip, get_shop_api

logger = logging.getLogger('storefront.checkout')

LAST_ORDER_SESSION_KEY = 'last_order'


def _load_profile(request, api):
    """Customer profile for prefill; a failed lookup only costs the prefill."""
    user_id = request.auth.get_user_id()
    if not user_id:
        return None
    try:
        return api.fetch_user_profile(user_id, token=request.auth.token)
    except ApiError as e:
        logger.warning("Failed to fetch profile for user %s: %s", user_id, e.message)
        return None


def _order_disabled(shipping):
    delivery_city, delivery_state = delivery_region()
    return (
        not all([shipping.name, shipping.address, shipping.city, shipping.pincode])
        or shipping.state != delivery_state
        or shipping.city != delivery_city
    )


def _render_checkout(request, form, shipping, status=200):
    delivery_city, delivery_state = delivery_region()
    return render(
        request,
        'storefront/pages/checkout.html',
        {
            'form': form,
            'cart_items': request.cart.items,
            'summary': request.cart.get_summary(),
            'location_warning': region_warning(shipping.city, shipping.state),
            'is_order_disabled': _order_disabled(shipping),
            'payment_methods': PAYMENT_METHODS,
            'delivery_city': delivery_city,
            'delivery_state': delivery_state,
        },
        status=status,
    )


@never_cache
def checkout(request):
    """
    Оформление заказа.

    GET: shipping form prefilled from the customer's profile.
    POST: validate and place the order through the shop API.
    """
    if request.method != 'POST':
        if not request.cart:
            messages.info(request, "Your cart is empty")
            return redirect('cart')
        profile = _load_profile(request, get_shop_api()) if request.auth.is_logged_in() else None
        initial = ShippingForm.initial_from_profile(profile, request.auth.user)
        form = ShippingForm(initial=initial)
        shipping = ShippingDetails.from_data(initial)
        return _render_checkout(request, form, shipping)

    form = ShippingForm(request.POST)
    shipping = ShippingDetails.from_data(request.POST)
    payment_method = request.POST.get('payment_method') or 'cod'

    coordinator = CheckoutCoordinator(
        request.cart,
        request.auth,
        get_shop_api(),
        location_providers=[
            BrowserLocation(request.POST),
            IpGeolocator(client_ip(request)),
        ],
        geo_timeout=getattr(settings, 'GEOLOCATION_TIMEOUT', None),
    )
    result = coordinator.submit(shipping, payment_method)

    if result.login_required:
        messages.error(request, result.message)
        return redirect(f"{reverse('login')}?{urlencode({'next': reverse('checkout')})}")

    if not result.succeeded:
        messages.error(request, result.message)
        return _render_checkout(request, form, shipping)

    order = result.order
    request.session[LAST_ORDER_SESSION_KEY] = {
        'message': result.message,
        'total': str(order.price),
        'address': order.address,
        'pincode': order.pincode,
        'payment_method': PAYMENT_METHODS.get(order.payment_method, order.payment_method),
        'items': sum(line.quantity for line in order.lines),
    }
    messages.success(request, result.message)
    return redirect('order_success')


def order_success(request):
    """
    Подтверждение заказа.
    """
    order = request.session.get(LAST_ORDER_SESSION_KEY)
    if not order:
        return redirect('home')
    return render(request, 'storefront/pages/order_success.html', {'order': order})
