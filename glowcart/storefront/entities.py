"""
Storefront records.

The storefront owns no database tables: everything it shows comes from the
shop API and is held in these plain dataclasses once the API payload has been
validated (see storefront.serializers).
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Product:
    """Product as returned by the shop API. Immutable once fetched."""
    product_id: str
    name: str
    price: Decimal
    brand: str = ""
    category: str = ""
    original_price: Optional[Decimal] = None
    rating: float = 0.0
    stock: bool = True
    image_url: str = ""

    @property
    def discount_percent(self) -> int:
        if not self.original_price or self.original_price <= self.price:
            return 0
        return int((self.original_price - self.price) * 100 / self.original_price)

    def to_cache(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "brand": self.brand,
            "category": self.category,
            "original_price": str(self.original_price) if self.original_price is not None else None,
            "rating": self.rating,
            "stock": self.stock,
            "image_url": self.image_url,
        }

    @classmethod
    def from_cache(cls, data: Dict[str, Any]) -> "Product":
        original_price = data.get("original_price")
        return cls(
            product_id=str(data["product_id"]),
            name=data["name"],
            price=Decimal(data["price"]),
            brand=data.get("brand") or "",
            category=data.get("category") or "",
            original_price=Decimal(original_price) if original_price is not None else None,
            rating=float(data.get("rating") or 0),
            stock=bool(data.get("stock")),
            image_url=data.get("image_url") or "",
        )


@dataclass(frozen=True)
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = "INDIA"


@dataclass(frozen=True)
class UserProfile:
    """Customer profile from the shop API, used to prefill checkout."""
    user_id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    pincode: str = ""
    address: Address = field(default_factory=Address)


@dataclass(frozen=True)
class SessionUser:
    """The `User` claim of the customer's JWT."""
    user_id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    avatar: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Customer"
