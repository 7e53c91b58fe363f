"""
Storefront client: cart, checkout and API access for B2B customers.

This package does not import Django; it talks to the ordering API over HTTP.
"""
from .cart import Cart
from .checkout import CheckoutConfirmation, CheckoutWorkflow, generate_order_number
from .client import StorefrontClient
from .models import CartItem, ProductSnapshot
from .storage import CartStorage, JsonFileCartStorage, MemoryCartStorage

__all__ = [
    'Cart',
    'CartItem',
    'CartStorage',
    'CheckoutConfirmation',
    'CheckoutWorkflow',
    'JsonFileCartStorage',
    'MemoryCartStorage',
    'ProductSnapshot',
    'StorefrontClient',
    'generate_order_number',
]
