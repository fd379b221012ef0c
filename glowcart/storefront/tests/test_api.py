"""
Unit tests for the shop API client (services/api.py) and payload serializers.
"""
from decimal import Decimal
from unittest import mock

import requests
from django.test import SimpleTestCase

from storefront.services.api import (
    ApiError,
    ApiSchemaError,
    ShopApiClient,
    parse_products,
    parse_user_profile,
)
from storefront.services.checkout import OrderLine, OrderRequest

PRODUCT_PAYLOAD = {
    'productId': 'p1',
    'name': 'Rose Serum',
    'brand': 'SkinLux',
    'category': 'Skincare',
    'price': 49.5,
    'originalPrice': 70,
    'rating': 4.4,
    'stock': 12,
    'imageUrl': 'https://cdn.example.com/rose.jpg',
}


def fake_response(status=200, json_data=None, text=''):
    response = mock.Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


class ParseProductsTests(SimpleTestCase):
    def test_bare_list(self):
        products = parse_products([PRODUCT_PAYLOAD])
        product = products[0]
        self.assertEqual(product.product_id, 'p1')
        self.assertEqual(product.price, Decimal('49.50'))
        self.assertEqual(product.original_price, Decimal('70.00'))
        self.assertTrue(product.stock)
        self.assertEqual(product.image_url, 'https://cdn.example.com/rose.jpg')
        self.assertEqual(product.discount_percent, 29)

    def test_wrapped_list(self):
        self.assertEqual(len(parse_products({'data': [PRODUCT_PAYLOAD]})), 1)
        self.assertEqual(len(parse_products({'products': [PRODUCT_PAYLOAD]})), 1)

    def test_optional_fields_default(self):
        product = parse_products([{'productId': 'p2', 'name': 'Kohl', 'price': '9'}])[0]
        self.assertEqual(product.brand, '')
        self.assertEqual(product.rating, 0.0)
        self.assertFalse(product.stock)
        self.assertIsNone(product.original_price)

    def test_zero_stock_count_is_out_of_stock(self):
        product = parse_products([{**PRODUCT_PAYLOAD, 'stock': 0}])[0]
        self.assertFalse(product.stock)

    def test_missing_price_is_schema_error(self):
        payload = {key: value for key, value in PRODUCT_PAYLOAD.items() if key != 'price'}
        with self.assertRaises(ApiSchemaError) as ctx:
            parse_products([payload])
        self.assertTrue(ctx.exception.errors)

    def test_negative_price_is_schema_error(self):
        with self.assertRaises(ApiSchemaError):
            parse_products([{**PRODUCT_PAYLOAD, 'price': -1}])

    def test_non_list_is_schema_error(self):
        with self.assertRaises(ApiSchemaError):
            parse_products({'message': 'nothing here'})


class ParseUserProfileTests(SimpleTestCase):
    def test_wrapped_profile_with_mongo_id(self):
        profile = parse_user_profile({
            'user': {
                '_id': 'u1',
                'name': 'Asha',
                'email': 'asha@example.com',
                'pincode': '800001',
                'address': {'street': '12 Boring Road', 'city': 'Patna', 'state': 'Bihar'},
            }
        })
        self.assertEqual(profile.user_id, 'u1')
        self.assertEqual(profile.address.city, 'Patna')
        self.assertEqual(profile.address.country, 'INDIA')

    def test_profile_without_id(self):
        with self.assertRaises(ApiSchemaError):
            parse_user_profile({'name': 'Nobody'})


class ShopApiClientTests(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.client = ShopApiClient(base_url='https://shop.example.com/api/', timeout=3, session=self.session)

    def test_search_by_name(self):
        self.session.request.return_value = fake_response(json_data=[PRODUCT_PAYLOAD])
        products = self.client.search_products_by_name('serum')
        self.assertEqual(products[0].name, 'Rose Serum')
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('GET', 'https://shop.example.com/api/products/search'))
        self.assertEqual(kwargs['params'], {'name': 'serum'})
        self.assertEqual(kwargs['timeout'], 3)

    def test_category_is_path_encoded(self):
        self.session.request.return_value = fake_response(json_data=[])
        self.client.get_products_by_category('Make-up essentials')
        url = self.session.request.call_args.args[1]
        self.assertEqual(url, 'https://shop.example.com/api/products/category/Make-up%20essentials')

    def test_brand_and_price_endpoints(self):
        self.session.request.return_value = fake_response(json_data=[])
        self.client.search_by_brand('ColorPro')
        self.assertEqual(self.session.request.call_args.kwargs['params'], {'brand': 'ColorPro'})
        self.client.search_by_price(199)
        self.assertTrue(self.session.request.call_args.args[1].endswith('/products/price/199'))

    def test_http_error_carries_message_and_status(self):
        self.session.request.return_value = fake_response(status=404, json_data={'message': 'No products found'})
        with self.assertRaises(ApiError) as ctx:
            self.client.search_by_brand('Nope')
        self.assertEqual(ctx.exception.message, 'No products found')
        self.assertEqual(ctx.exception.status_code, 404)

    def test_http_error_with_text_body(self):
        self.session.request.return_value = fake_response(status=500, text='Internal error')
        with self.assertRaises(ApiError) as ctx:
            self.client.search_by_brand('X')
        self.assertEqual(ctx.exception.message, 'Internal error')

    def test_timeout(self):
        self.session.request.side_effect = requests.exceptions.Timeout()
        with self.assertRaises(ApiError) as ctx:
            self.client.search_products_by_name('serum')
        self.assertIn('too long', ctx.exception.message)
        self.assertIsNone(ctx.exception.status_code)

    def test_connection_error(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError()
        with self.assertRaises(ApiError):
            self.client.search_products_by_name('serum')

    def test_unreadable_body_is_schema_error(self):
        self.session.request.return_value = fake_response(text='<html>')
        with self.assertRaises(ApiSchemaError):
            self.client.search_products_by_name('serum')

    def test_place_order(self):
        self.session.request.return_value = fake_response(json_data={'message': 'Order confirmed'})
        order = OrderRequest(
            user_id='u1',
            lines=[OrderLine('p1', 2)],
            address='12 Boring Road, Patna, Bihar',
            pincode=800001,
            price=Decimal('236.00'),
            phone='9999999999',
            payment_method='cod',
        )
        message = self.client.place_order(order, 25.6, 85.1, token='jwt-token')

        self.assertEqual(message, 'Order confirmed')
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('POST', 'https://shop.example.com/api/orders'))
        self.assertEqual(kwargs['params'], {'lat': 25.6, 'lng': 85.1})
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer jwt-token')
        self.assertEqual(kwargs['json'], {
            'userId': 'u1',
            'products': [{'productId': 'p1', 'quantity': 2}],
            'address': '12 Boring Road, Patna, Bihar',
            'pincode': 800001,
            'price': 236.0,
            'phone': '9999999999',
            'paymentMethod': 'cod',
        })

    def test_place_order_plain_text_answer(self):
        self.session.request.return_value = fake_response(text='Order placed')
        order = OrderRequest('u1', [OrderLine('p1', 1)], 'a, Patna, Bihar', 800001, Decimal('10'), '', 'cod')
        self.assertEqual(self.client.place_order(order, 0.0, 0.0), 'Order placed')

    def test_login_returns_token(self):
        self.session.request.return_value = fake_response(json_data={'token': 'abc.def.ghi'})
        self.assertEqual(self.client.login('a@example.com', 'secret'), 'abc.def.ghi')

    def test_login_without_token(self):
        self.session.request.return_value = fake_response(json_data={'ok': True})
        with self.assertRaises(ApiSchemaError):
            self.client.login('a@example.com', 'secret')

    def test_fetch_user_profile_sends_token(self):
        self.session.request.return_value = fake_response(json_data={'id': 'u1', 'name': 'Asha'})
        profile = self.client.fetch_user_profile('u1', token='jwt-token')
        self.assertEqual(profile.name, 'Asha')
        self.assertEqual(self.session.request.call_args.kwargs['headers']['Authorization'], 'Bearer jwt-token')
