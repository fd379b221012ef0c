"""
Cart views - корзина покупок.

Содержит views для:
- Просмотра корзины
- Добавления товаров
- Обновления количества
- Удаления товаров
- Очистки корзины

All of them work on `request.cart` (see storefront.middleware); the session
is written back by the store's subscription.
"""
import logging

from django.conf import settings
from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_POST

from ..services.catalog import recall_product
from .utils import cart_payload, json_error, wants_json

cart_logger = logging.getLogger('storefront.cart')


def _parse_quantity(raw, default=1):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


# ==================== CART VIEWS ====================

@never_cache
def view_cart(request):
    """
    Страница просмотра корзины.

    Context:
        cart_items: line items
        summary: OrderSummary (subtotal, tax, shipping, total)
        free_shipping_threshold: subtotal above which shipping is free
    """
    return render(
        request,
        'storefront/pages/cart.html',
        {
            'cart_items': request.cart.items,
            'summary': request.cart.get_summary(),
            'free_shipping_threshold': settings.STOREFRONT_FREE_SHIPPING_THRESHOLD,
        },
    )


@require_POST
def add_to_cart(request):
    """
    Добавляет товар в корзину.

    POST params:
        product_id: product shown on the search page
        qty: units to add (default 1)

    Out-of-stock products are refused. A product already in the cart is not
    added twice: the answer sends the customer to the cart instead.

    Returns:
        JsonResponse: success, count, total, redirect (when already in cart)
    """
    product_id = (request.POST.get('product_id') or '').strip()
    qty = max(_parse_quantity(request.POST.get('qty')), 1)

    product = recall_product(product_id) if product_id else None
    if product is None:
        cart_logger.warning("add_to_cart: unknown product %r", product_id)
        return json_error("Product not found", status=404)

    if not product.stock:
        return json_error(f"{product.name} is out of stock")

    if request.cart.contains(product.product_id):
        return JsonResponse({
            'success': True,
            'already_in_cart': True,
            'redirect': reverse('cart'),
            **cart_payload(request.cart),
        })

    request.cart.add_item(product, qty)
    cart_logger.info("Added %s x%s to cart", product.product_id, qty)
    return JsonResponse({
        'success': True,
        'already_in_cart': False,
        'message': f"{product.name} added to cart",
        **cart_payload(request.cart),
    })


@require_POST
def update_cart(request):
    """
    Обновление количества товара в корзине.

    POST params:
        product_id: line to change
        qty: new quantity; below 1 removes the line

    Returns:
        JsonResponse: success, removed, line_total, count, subtotal, tax,
        shipping, total (or a redirect to the cart for plain form posts)
    """
    product_id = (request.POST.get('product_id') or '').strip()
    qty = _parse_quantity(request.POST.get('qty'), default=None)
    if qty is None:
        if wants_json(request):
            return json_error("Quantity must be a number")
        messages.error(request, "Quantity must be a number")
        return redirect('cart')

    if not request.cart.contains(product_id):
        if wants_json(request):
            return json_error("Item is not in your cart", status=404)
        return redirect('cart')

    request.cart.update_quantity(product_id, qty)
    item = request.cart.get(product_id)

    if not wants_json(request):
        return redirect('cart')
    return JsonResponse({
        'success': True,
        'removed': item is None,
        'line_total': float(item.line_total) if item else 0.0,
        **cart_payload(request.cart),
    })


@require_POST
def remove_from_cart(request):
    """
    Удаление позиции из корзины. Missing items are not an error.
    """
    product_id = (request.POST.get('product_id') or '').strip()
    request.cart.remove_item(product_id)
    if wants_json(request):
        return JsonResponse({'success': True, **cart_payload(request.cart)})
    messages.info(request, "Item removed from cart")
    return redirect('cart')


@require_POST
def clear_cart(request):
    """
    Очистка корзины.
    """
    request.cart.clear()
    if wants_json(request):
        return JsonResponse({'success': True, **cart_payload(request.cart)})
    return redirect('cart')


def get_cart_count(request):
    """
    AJAX endpoint для получения количества товаров в корзине.

    Returns:
        JsonResponse: cart_count
    """
    return JsonResponse({'cart_count': request.cart.get_count()})
