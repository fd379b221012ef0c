"""
Django REST Framework serializers for shop API payloads.

The shop API speaks camelCase JSON; these serializers validate each payload at
the boundary and turn it into the records from storefront.entities. Field names
follow the wire format, `source` maps them onto the record attributes.
"""
from decimal import Decimal

from rest_framework import serializers

from .entities import Address, Product, SessionUser, UserProfile

CENTS = Decimal('0.01')


class TruthyStockField(serializers.Field):
    """
    Stock flag. The API sends either a boolean or a unit count; any non-zero
    count means the product can be bought.
    """
    default_error_messages = {
        'invalid': 'Expected a boolean or a number of units.',
    }

    def to_internal_value(self, data):
        if isinstance(data, bool):
            return data
        if isinstance(data, (int, float)):
            return data > 0
        if isinstance(data, str):
            value = data.strip().lower()
            if value in ('true', '1', 'yes'):
                return True
            if value in ('false', '0', 'no', ''):
                return False
        self.fail('invalid')

    def to_representation(self, value):
        return bool(value)


class ProductSerializer(serializers.Serializer):
    """
    Product card as returned by the search endpoints.

    Fields:
        - productId: unique product identifier
        - name, brand, category: display strings
        - price / originalPrice: selling and list price
        - rating: average rating, 0 when unrated
        - stock: availability flag or unit count
        - imageUrl: primary image
    """
    productId = serializers.CharField(source='product_id')
    name = serializers.CharField()
    brand = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    price = serializers.DecimalField(max_digits=None, decimal_places=None, min_value=Decimal('0'))
    originalPrice = serializers.DecimalField(
        source='original_price',
        max_digits=None,
        decimal_places=None,
        min_value=Decimal('0'),
        required=False,
        allow_null=True,
        default=None,
    )
    rating = serializers.FloatField(required=False, allow_null=True, default=0.0, min_value=0)
    stock = TruthyStockField(required=False, default=False)
    imageUrl = serializers.CharField(source='image_url', required=False, allow_blank=True, allow_null=True, default='')

    def create(self, validated_data):
        original_price = validated_data.get('original_price')
        return Product(
            product_id=validated_data['product_id'],
            name=validated_data['name'],
            price=validated_data['price'].quantize(CENTS),
            brand=validated_data.get('brand') or '',
            category=validated_data.get('category') or '',
            original_price=original_price.quantize(CENTS) if original_price is not None else None,
            rating=validated_data.get('rating') or 0.0,
            stock=validated_data.get('stock', False),
            image_url=validated_data.get('image_url') or '',
        )


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(required=False, allow_blank=True, default='')
    city = serializers.CharField(required=False, allow_blank=True, default='')
    state = serializers.CharField(required=False, allow_blank=True, default='')
    country = serializers.CharField(required=False, allow_blank=True, default='INDIA')


class UserProfileSerializer(serializers.Serializer):
    """Customer profile used to prefill the checkout form."""
    id = serializers.CharField(source='user_id')
    name = serializers.CharField(required=False, allow_blank=True, default='')
    email = serializers.CharField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    pincode = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    address = AddressSerializer(required=False, allow_null=True)

    def create(self, validated_data):
        address = validated_data.get('address') or {}
        return UserProfile(
            user_id=validated_data['user_id'],
            name=validated_data.get('name') or '',
            email=validated_data.get('email') or '',
            phone=validated_data.get('phone') or '',
            pincode=validated_data.get('pincode') or '',
            address=Address(**address),
        )


class TokenUserSerializer(serializers.Serializer):
    """The `User` claim embedded in the customer's JWT."""
    id = serializers.CharField(source='user_id')
    name = serializers.CharField(required=False, allow_blank=True, default='')
    email = serializers.CharField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    avatar = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')

    def create(self, validated_data):
        return SessionUser(
            user_id=validated_data['user_id'],
            name=validated_data.get('name') or '',
            email=validated_data.get('email') or '',
            phone=validated_data.get('phone') or '',
            avatar=validated_data.get('avatar') or '',
        )


class LoginResponseSerializer(serializers.Serializer):
    token = serializers.CharField()


class OrderLineSerializer(serializers.Serializer):
    productId = serializers.CharField(source='product_id')
    quantity = serializers.IntegerField(min_value=1)


class OrderRequestSerializer(serializers.Serializer):
    """Outgoing order payload, rendered from a checkout OrderRequest."""
    userId = serializers.CharField(source='user_id')
    products = OrderLineSerializer(source='lines', many=True)
    address = serializers.CharField()
    pincode = serializers.IntegerField()
    price = serializers.FloatField()
    phone = serializers.CharField(allow_blank=True)
    paymentMethod = serializers.CharField(source='payment_method')
