"""
Client for the shop API.

The storefront is a pure client of this JSON/HTTP API: product searches, order
placement, customer profiles and login all go through ShopApiClient. Every
response is validated with the serializers from storefront.serializers before
it leaves this module.

Main methods:
- search_products_by_name / get_products_by_category / search_by_brand /
  search_by_price: product queries
- place_order: submit a checkout OrderRequest
- fetch_user_profile: customer profile for checkout prefill
- login: exchange credentials for a JWT
"""
import logging
from urllib.parse import quote

import requests
from django.conf import settings

from ..serializers import (
    LoginResponseSerializer,
    OrderRequestSerializer,
    ProductSerializer,
    UserProfileSerializer,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Shop API rejected a request or could not be reached."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiSchemaError(ApiError):
    """Shop API answered with a payload that does not match the expected schema."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}


def _unwrap_list(payload, *keys):
    if isinstance(payload, dict):
        for key in keys:
            if isinstance(payload.get(key), list):
                return payload[key]
    return payload


def parse_products(payload):
    """
    Validates a product list payload.

    Accepts either a bare JSON array or an object wrapping it under
    `data` / `products`.

    Raises:
        ApiSchemaError: payload is not a list of valid products
    """
    payload = _unwrap_list(payload, 'data', 'products')
    if not isinstance(payload, list):
        raise ApiSchemaError(
            f"Expected a list of products, got {type(payload).__name__}",
        )
    serializer = ProductSerializer(data=payload, many=True)
    if not serializer.is_valid():
        raise ApiSchemaError("Malformed product payload", errors=serializer.errors)
    return serializer.save()


def parse_user_profile(payload):
    if isinstance(payload, dict) and isinstance(payload.get('user'), dict):
        payload = payload['user']
    if isinstance(payload, dict) and '_id' in payload and 'id' not in payload:
        payload = {**payload, 'id': payload['_id']}
    serializer = UserProfileSerializer(data=payload)
    if not serializer.is_valid():
        raise ApiSchemaError("Malformed user profile payload", errors=serializer.errors)
    return serializer.save()


class ShopApiClient:
    """
    Thin requests-based client for the shop API.

    Network failures, HTTP error statuses and undecodable bodies are raised as
    ApiError carrying a message suitable for showing to the customer.
    """

    DEFAULT_TIMEOUT = 10  # секунды

    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or getattr(settings, 'SHOP_API_URL', '')).rstrip('/')
        self.timeout = timeout or getattr(settings, 'SHOP_API_TIMEOUT', self.DEFAULT_TIMEOUT)
        self.session = session or requests.Session()

        if not self.base_url:
            logger.warning("SHOP_API_URL is not configured")

    def _url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _error_message(response):
        try:
            data = response.json()
        except ValueError:
            text = (response.text or '').strip()
            return text or f"Request failed with status {response.status_code}"
        if isinstance(data, dict):
            for key in ('message', 'error', 'detail'):
                if data.get(key):
                    return str(data[key])
        if isinstance(data, str) and data:
            return data
        return f"Request failed with status {response.status_code}"

    def _request(self, method, path, *, params=None, json=None, token=None, expect_json=True):
        headers = {'Accept': 'application/json'}
        if token:
            headers['Authorization'] = f"Bearer {token}"

        url = self._url(path)
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning("Shop API timeout for %s %s: %s", method, url, e)
            raise ApiError("The shop is taking too long to respond. Please try again.") from e
        except requests.exceptions.RequestException as e:
            logger.error("Shop API network error for %s %s: %s", method, url, e)
            raise ApiError("Could not reach the shop. Please try again.") from e

        if not response.ok:
            message = self._error_message(response)
            logger.warning(
                "Shop API %s %s returned %s: %s", method, url, response.status_code, message
            )
            raise ApiError(message, status_code=response.status_code)

        if not expect_json:
            return response

        try:
            return response.json()
        except ValueError as e:
            logger.error("Shop API returned non-JSON body for %s %s", method, url)
            raise ApiSchemaError("The shop returned an unreadable response.") from e

    # ==================== PRODUCTS ====================

    def search_products_by_name(self, name):
        payload = self._request('GET', 'products/search', params={'name': name})
        return parse_products(payload)

    def get_products_by_category(self, category):
        payload = self._request('GET', f"products/category/{quote(category, safe='')}")
        return parse_products(payload)

    def search_by_brand(self, brand):
        payload = self._request('GET', 'products/brand', params={'brand': brand})
        return parse_products(payload)

    def search_by_price(self, price):
        payload = self._request('GET', f"products/price/{price}")
        return parse_products(payload)

    # ==================== ORDERS ====================

    def place_order(self, order_request, latitude, longitude, token=None):
        """
        Submits an order.

        Args:
            order_request: checkout OrderRequest
            latitude, longitude: delivery coordinates, (0, 0) when unknown
            token: customer's JWT

        Returns:
            str: confirmation message from the shop

        Raises:
            ApiError: the shop rejected the order
        """
        payload = OrderRequestSerializer(order_request).data
        response = self._request(
            'POST',
            'orders',
            params={'lat': latitude, 'lng': longitude},
            json=payload,
            token=token,
            expect_json=False,
        )
        logger.info(
            "Order placed for user %s: %s item(s), total %s",
            order_request.user_id, len(order_request.lines), order_request.price,
        )
        try:
            data = response.json()
        except ValueError:
            return (response.text or '').strip() or "Order placed successfully!"
        if isinstance(data, dict):
            return str(data.get('message') or "Order placed successfully!")
        return str(data)

    # ==================== CUSTOMERS ====================

    def fetch_user_profile(self, user_id, token=None):
        payload = self._request('GET', f"users/{quote(str(user_id), safe='')}", token=token)
        return parse_user_profile(payload)

    def login(self, email, password):
        payload = self._request('POST', 'auth/login', json={'email': email, 'password': password})
        serializer = LoginResponseSerializer(data=payload if isinstance(payload, dict) else {})
        if not serializer.is_valid():
            raise ApiSchemaError("Login response has no token", errors=serializer.errors)
        return serializer.validated_data['token']
