"""
Shopping cart store.

CartStore keeps one line item per product and notifies subscribers after every
change. CartMiddleware (storefront.middleware) builds one store per request
from the session and subscribes a listener that writes it back, so views only
ever talk to `request.cart`.

Session layout::

    request.session['cart'] = {
        '<product_id>': {'product_id': ..., 'name': ..., 'price': '49.99',
                         'qty': 2, 'brand': ..., 'image_url': ..., 'stock': True},
    }
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Dict, Iterator, List, Optional

from django.conf import settings

from ..entities import Product

cart_logger = logging.getLogger('storefront.cart')

CENTS = Decimal('0.01')


def money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class CartItem:
    product_id: str
    name: str
    price: Decimal
    quantity: int = 1
    brand: str = ""
    image_url: str = ""
    stock: bool = True

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_session(self) -> Dict:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'price': str(self.price),
            'qty': self.quantity,
            'brand': self.brand,
            'image_url': self.image_url,
            'stock': self.stock,
        }

    @classmethod
    def from_session(cls, data: Dict) -> "CartItem":
        quantity = int(data.get('qty', 1))
        if quantity < 1:
            raise ValueError(f"quantity must be positive, got {quantity}")
        return cls(
            product_id=str(data['product_id']),
            name=data.get('name') or '',
            price=Decimal(str(data['price'])),
            quantity=quantity,
            brand=data.get('brand') or '',
            image_url=data.get('image_url') or '',
            stock=bool(data.get('stock', True)),
        )

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(
            product_id=product.product_id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            brand=product.brand,
            image_url=product.image_url,
            stock=product.stock,
        )


@dataclass(frozen=True)
class OrderSummary:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0


def summarize(subtotal, tax_rate=None, shipping_fee=None, free_shipping_threshold=None) -> OrderSummary:
    """
    Order summary for a cart subtotal.

    tax = subtotal * tax rate (18% by default); shipping is free once the
    subtotal exceeds the threshold, otherwise the flat fee; an empty cart
    ships for free.
    """
    if tax_rate is None:
        tax_rate = settings.STOREFRONT_TAX_RATE
    if shipping_fee is None:
        shipping_fee = settings.STOREFRONT_SHIPPING_FEE
    if free_shipping_threshold is None:
        free_shipping_threshold = settings.STOREFRONT_FREE_SHIPPING_THRESHOLD

    subtotal = Decimal(subtotal)
    tax = subtotal * Decimal(tax_rate)
    if subtotal <= 0 or subtotal > Decimal(free_shipping_threshold):
        shipping = Decimal('0')
    else:
        shipping = Decimal(shipping_fee)
    return OrderSummary(
        subtotal=money(subtotal),
        tax=money(tax),
        shipping=money(shipping),
        total=money(subtotal + tax + shipping),
    )


Listener = Callable[["CartStore"], None]


class CartStore:
    """
    Keyed collection of cart line items with subscribe/notify.

    No upper bound is put on quantities; the shop API owns stock checks.
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self._items: Dict[str, CartItem] = {}
        for item in items or []:
            self._items[item.product_id] = item
        self._listeners: List[Listener] = []

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    # ==================== MUTATIONS ====================

    def add_item(self, product: Product, quantity: int = 1) -> CartItem:
        if quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {quantity}")
        item = self._items.get(product.product_id)
        if item is not None:
            item.quantity += quantity
        else:
            item = CartItem.from_product(product, quantity)
            self._items[product.product_id] = item
        cart_logger.debug("Cart add %s x%s -> qty %s", product.product_id, quantity, item.quantity)
        self._notify()
        return item

    def update_quantity(self, product_id: str, quantity: int):
        product_id = str(product_id)
        if quantity < 1:
            self.remove_item(product_id)
            return
        item = self._items.get(product_id)
        if item is None:
            return
        item.quantity = quantity
        self._notify()

    def remove_item(self, product_id: str):
        if self._items.pop(str(product_id), None) is not None:
            cart_logger.debug("Cart remove %s", product_id)
            self._notify()

    def clear(self):
        self._items.clear()
        self._notify()

    # ==================== QUERIES ====================

    def get_total(self) -> Decimal:
        return sum((item.line_total for item in self._items.values()), Decimal('0'))

    def get_count(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def get_summary(self) -> OrderSummary:
        return summarize(self.get_total())

    def contains(self, product_id: str) -> bool:
        return str(product_id) in self._items

    def get(self, product_id: str) -> Optional[CartItem]:
        return self._items.get(str(product_id))

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    @property
    def product_ids(self) -> List[str]:
        return list(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    # ==================== SESSION ====================

    def to_session(self) -> Dict[str, Dict]:
        return {product_id: item.to_session() for product_id, item in self._items.items()}

    @classmethod
    def from_session(cls, data) -> "CartStore":
        """Rebuilds a store from session data, dropping rows that fail to parse."""
        items = []
        if isinstance(data, dict):
            for key, row in data.items():
                try:
                    items.append(CartItem.from_session(row))
                except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as e:
                    cart_logger.warning("Dropping malformed cart row %s: %s", key, e)
        return cls(items)
