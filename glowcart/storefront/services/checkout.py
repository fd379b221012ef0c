"""
Checkout coordinator.

Walks one order submission through

    IDLE -> VALIDATING -> SUBMITTING -> SUCCEEDED | FAILED

Validation problems send the coordinator straight back to IDLE with a message
and nothing is sent to the shop. A failed submission reports FAILED and leaves
the coordinator IDLE again, ready for the customer to retry. Orders are never
retried automatically.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from django.conf import settings

from .api import ApiError
from .geolocation import Coordinates, coordinates_or_default, resolve_location

logger = logging.getLogger('storefront.checkout')

PAYMENT_METHODS = {
    'cod': 'Cash on Delivery',
    'online': 'Online Payment',
}

MSG_LOGIN_REQUIRED = "Please log in to place an order"
MSG_EMPTY_CART = "Your cart is empty"
MSG_MISSING_FIELDS = "Please fill all shipping details"
MSG_BAD_PINCODE = "Pincode must be a number"
MSG_BAD_PAYMENT = "Please choose a payment method"
MSG_IN_PROGRESS = "Your order is already being placed"
MSG_ORDER_FAILED = "Failed to place order"


class CheckoutState(enum.Enum):
    IDLE = 'idle'
    VALIDATING = 'validating'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@dataclass
class ShippingDetails:
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""

    @classmethod
    def from_data(cls, data) -> "ShippingDetails":
        return cls(**{
            name: (data.get(name) or '').strip()
            for name in ('name', 'email', 'phone', 'address', 'city', 'state', 'pincode')
        })

    @property
    def full_address(self) -> str:
        return f"{self.address}, {self.city}, {self.state}"


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity: int


@dataclass
class OrderRequest:
    user_id: str
    lines: List[OrderLine]
    address: str
    pincode: int
    price: Decimal
    phone: str
    payment_method: str


@dataclass
class CheckoutResult:
    state: CheckoutState
    message: str
    login_required: bool = False
    order: Optional[OrderRequest] = None
    coordinates: Optional[Coordinates] = None

    @property
    def succeeded(self) -> bool:
        return self.state is CheckoutState.SUCCEEDED


class CheckoutValidationError(Exception):
    def __init__(self, message, login_required=False):
        super().__init__(message)
        self.message = message
        self.login_required = login_required


def delivery_region():
    return (
        getattr(settings, 'STOREFRONT_DELIVERY_CITY', 'Patna'),
        getattr(settings, 'STOREFRONT_DELIVERY_STATE', 'Bihar'),
    )


def region_message() -> str:
    city, state = delivery_region()
    return f"We currently deliver only in {city}, {state}"


def region_warning(city: str, state: str) -> str:
    """Inline warning for the city/state selects; empty when the pair is deliverable."""
    delivery_city, delivery_state = delivery_region()
    if state and state != delivery_state:
        return f"We currently deliver only in {delivery_state} ({delivery_city})."
    if city and city != delivery_city:
        return f"We currently deliver only in {delivery_city}, {delivery_state}."
    return ""


class CheckoutCoordinator:
    """
    Coordinates one customer's order placement.

    Args:
        cart: CartStore of the current session
        auth: SessionAuth of the current session
        api: ShopApiClient used to place the order
        location_providers: providers tried for delivery coordinates
        geo_timeout: seconds each location provider may take
    """

    def __init__(self, cart, auth, api, location_providers: Sequence = (), geo_timeout=None):
        self.cart = cart
        self.auth = auth
        self.api = api
        self.location_providers = list(location_providers)
        self.geo_timeout = geo_timeout
        self.state = CheckoutState.IDLE

    def validate(self, shipping: ShippingDetails, payment_method: str):
        if not self.auth.is_logged_in() or not self.auth.get_user_id():
            raise CheckoutValidationError(MSG_LOGIN_REQUIRED, login_required=True)
        if not self.cart:
            raise CheckoutValidationError(MSG_EMPTY_CART)
        if not all([shipping.name, shipping.address, shipping.city, shipping.pincode]):
            raise CheckoutValidationError(MSG_MISSING_FIELDS)
        # only ASCII digits: int() rejects superscripts that isdigit() accepts
        if not (shipping.pincode.isascii() and shipping.pincode.isdigit()):
            raise CheckoutValidationError(MSG_BAD_PINCODE)
        if payment_method not in PAYMENT_METHODS:
            raise CheckoutValidationError(MSG_BAD_PAYMENT)
        delivery_city, delivery_state = delivery_region()
        if shipping.state != delivery_state or shipping.city != delivery_city:
            raise CheckoutValidationError(region_message())

    def build_order(self, shipping: ShippingDetails, payment_method: str) -> OrderRequest:
        return OrderRequest(
            user_id=self.auth.get_user_id(),
            lines=[OrderLine(item.product_id, item.quantity) for item in self.cart.items],
            address=shipping.full_address,
            pincode=int(shipping.pincode),
            price=self.cart.get_summary().total,
            phone=shipping.phone,
            payment_method=payment_method,
        )

    def submit(self, shipping: ShippingDetails, payment_method: str = 'cod') -> CheckoutResult:
        if self.state is CheckoutState.SUBMITTING:
            return CheckoutResult(CheckoutState.SUBMITTING, MSG_IN_PROGRESS)

        self.state = CheckoutState.VALIDATING
        try:
            self.validate(shipping, payment_method)
        except CheckoutValidationError as e:
            self.state = CheckoutState.IDLE
            logger.info("Checkout validation failed: %s", e.message)
            return CheckoutResult(CheckoutState.IDLE, e.message, login_required=e.login_required)

        order = self.build_order(shipping, payment_method)
        self.state = CheckoutState.SUBMITTING

        coordinates = coordinates_or_default(
            resolve_location(self.location_providers, self.geo_timeout)
        )
        try:
            message = self.api.place_order(
                order,
                coordinates.latitude,
                coordinates.longitude,
                token=self.auth.token,
            )
        except ApiError as e:
            self.state = CheckoutState.IDLE
            logger.warning("Order placement failed for user %s: %s", order.user_id, e.message)
            return CheckoutResult(
                CheckoutState.FAILED,
                e.message or MSG_ORDER_FAILED,
                order=order,
                coordinates=coordinates,
            )

        self.cart.clear()
        self.state = CheckoutState.SUCCEEDED
        return CheckoutResult(
            CheckoutState.SUCCEEDED,
            message,
            order=order,
            coordinates=coordinates,
        )
