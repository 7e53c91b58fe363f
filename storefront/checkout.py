"""
Checkout Workflow - turns the cart into a submitted order.

1. Re-read live stock for every cart line from the catalog
2. Abort the whole checkout if any product is gone or short of stock
3. Generate a PO-YYMMDD-NNNN order number
4. Build the line items and total from the cart
5. Submit header and items in one request
6. On success clear the cart; on any failure leave it exactly as it was

New-order notification is dispatched by the server once the order commits.
"""
import logging
import random
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.result import ErrorKind, Failure, Result, Success
from .cart import Cart
from .client import StorefrontClient

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = 'PO'
CENTS = Decimal('0.01')


def generate_order_number(today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    """
    ``PO-YYMMDD-NNNN`` with a random four-digit suffix.

    Unique with high probability only; the server rejects a number that is
    already taken.
    """
    today = today or date.today()
    rng = rng or random
    return f"{ORDER_NUMBER_PREFIX}-{today:%y%m%d}-{rng.randrange(10000):04d}"


@dataclass(frozen=True)
class CheckoutConfirmation:
    order_number: str
    order: Dict[str, Any]


class CheckoutWorkflow:
    """
    Checkout for one cart against one API client.

    Args:
        client: API client used for the stock check and submission
        cart: The cart to check out
        today: Optional callable returning the date used in order numbers
        rng: Optional random source for order number suffixes
    """

    def __init__(self, client: StorefrontClient, cart: Cart, today=None, rng: Optional[random.Random] = None):
        self.client = client
        self.cart = cart
        self.today = today or date.today
        self.rng = rng
        self.submitting = False

    def validate_stock(self) -> Result:
        """
        Check every cart line against live catalog stock.

        Returns:
            Success(None) when every line can be fulfilled, otherwise a
            Failure naming the first offending product
        """
        listing = self.client.list_product_snapshots(is_active=True)
        if not isinstance(listing, Success):
            logger.error(f"Stock validation could not read catalog: {listing.message}")
            return Failure(ErrorKind.TRANSPORT, 'Could not validate stock')

        live = {product.id: product for product in listing.data}
        for item in self.cart.items:
            product = live.get(item.product.id)
            if product is None:
                return Failure(
                    ErrorKind.NOT_FOUND,
                    f"{item.product.name} is no longer available (available: 0)"
                )
            if product.stock_quantity < item.quantity:
                return Failure(
                    ErrorKind.INSUFFICIENT_STOCK,
                    f"Insufficient stock for {item.product.name} (available: {product.stock_quantity})"
                )
        return Success(None)

    def build_order_items(self) -> List[Dict[str, Any]]:
        items = []
        for item in self.cart.items:
            unit_price = item.product.price.quantize(CENTS)
            items.append({
                'product_id': item.product.id,
                'product_code': item.product.product_code,
                'product_name': item.product.name,
                'quantity': item.quantity,
                'unit_price': str(unit_price),
                'total_price': str((unit_price * item.quantity).quantize(CENTS)),
            })
        return items

    def build_order_request(self, user_id: int, order_number: str, notes: Optional[str] = None) -> Dict[str, Any]:
        items = self.build_order_items()
        total = sum((Decimal(item['total_price']) for item in items), Decimal('0.00'))
        return {
            'order_number': order_number,
            'user_id': user_id,
            'status': 'pending',
            'total_amount': str(total.quantize(CENTS)),
            'notes': notes or None,
            'items': items,
        }

    def submit(self, user_id: int, notes: Optional[str] = None) -> Result:
        """
        Validate the cart, place the order and clear the cart on success.

        Returns:
            Success(CheckoutConfirmation) or the Failure that stopped the
            checkout; the cart is only modified on success
        """
        if self.submitting:
            return Failure(ErrorKind.VALIDATION, 'Checkout already in progress')
        if len(self.cart) == 0:
            return Failure(ErrorKind.VALIDATION, 'Cart is empty')

        self.submitting = True
        try:
            stock_check = self.validate_stock()
            if not stock_check.ok:
                logger.info(f"Checkout for user {user_id} stopped: {stock_check.message}")
                return stock_check

            order_number = generate_order_number(self.today(), self.rng)
            result = self.client.create_order(self.build_order_request(user_id, order_number, notes))
            if not isinstance(result, Success):
                logger.warning(f"Order {order_number} was not placed: {result.message}")
                return result

            self.cart.clear()
            logger.info(f"Order {order_number} placed for user {user_id}")
            return Success(CheckoutConfirmation(order_number, result.data))
        finally:
            self.submitting = False
