"""
Client-side value types for the storefront.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict


@dataclass(frozen=True)
class ProductSnapshot:
    """
    A product as last seen in a catalog listing.

    The stock figure is advisory on the client; checkout re-reads it from
    the server before submitting.
    """
    id: int
    product_code: str
    name: str
    price: Decimal
    stock_quantity: int
    brand: str = ''
    dimensions: str = ''
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductSnapshot':
        return cls(
            id=int(data['id']),
            product_code=str(data['product_code']),
            name=str(data['name']),
            price=Decimal(str(data['price'])),
            stock_quantity=int(data['stock_quantity']),
            brand=str(data.get('brand') or ''),
            dimensions=str(data.get('dimensions') or ''),
            is_active=bool(data.get('is_active', True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'product_code': self.product_code,
            'name': self.name,
            'price': str(self.price),
            'stock_quantity': self.stock_quantity,
            'brand': self.brand,
            'dimensions': self.dimensions,
            'is_active': self.is_active,
        }

    def with_stock(self, stock_quantity: int) -> 'ProductSnapshot':
        return replace(self, stock_quantity=stock_quantity)


@dataclass
class CartItem:
    product: ProductSnapshot
    quantity: int = field(default=1)

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        return cls(product=ProductSnapshot.from_dict(data['product']), quantity=int(data['quantity']))

    def to_dict(self) -> Dict[str, Any]:
        return {'product': self.product.to_dict(), 'quantity': self.quantity}
