"""
Order Service Layer - Atomic order creation logic.

Order placement commits in one transaction:
1. Insert the order header
2. Lock the referenced product rows with select_for_update()
3. For each line, in the order given: insert the OrderItem snapshot,
   then decrement the product's stock
4. If ANY step fails: roll back header, items and every decrement
5. After commit: queue the new-order notification

Services return ``core.result`` values instead of raising for business
failures, so the API layer can report them inside the ``{data, error}``
envelope.
"""
import logging
import re
from decimal import Decimal
from functools import partial
from typing import Dict, List, Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q, Sum

from accounts.models import Account
from catalog.models import Product
from core.result import ErrorKind, Failure, Result, Success
from notifications.tasks import dispatch_order_notification
from .models import Order, OrderItem

logger = logging.getLogger(__name__)

ORDER_NUMBER_PATTERN = re.compile(r'^PO-\d{6}-\d{4}$')
CENTS = Decimal('0.01')


class OrderValidationError(Exception):
    """Raised when an order request is malformed or inconsistent."""
    pass


class InsufficientStockError(Exception):
    """Raised when a locked product row cannot cover an order line."""
    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}: "
            f"requested {requested}, available: {available}"
        )


class DuplicateOrderNumberError(Exception):
    """Raised when an order number is already taken."""
    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Order number {order_number} already exists")


class ProductNotFoundError(Exception):
    """Raised when an order line references a missing or inactive product."""
    def __init__(self, product_id: int, product_name: str = ''):
        self.product_id = product_id
        super().__init__(
            f"Product {product_name or product_id} not found or inactive"
        )


def validate_order_items(items: List[Dict]) -> None:
    """
    Validate order items structure and line arithmetic.

    Args:
        items: List of dicts with 'product_id', 'product_code',
            'product_name', 'quantity', 'unit_price' and 'total_price'

    Raises:
        OrderValidationError: If validation fails
    """
    if not items:
        raise OrderValidationError("Order must contain at least one item")

    seen_products = set()
    for idx, item in enumerate(items):
        for key in ('product_id', 'product_code', 'product_name', 'quantity', 'unit_price', 'total_price'):
            if item.get(key) in (None, ''):
                raise OrderValidationError(f"Item {idx}: missing '{key}'")

        product_id = item['product_id']
        quantity = item['quantity']

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise OrderValidationError(f"Item {idx}: quantity must be a positive integer")

        unit_price = Decimal(item['unit_price'])
        if unit_price < 0:
            raise OrderValidationError(f"Item {idx}: unit_price must not be negative")

        expected = (unit_price * quantity).quantize(CENTS)
        if Decimal(item['total_price']).quantize(CENTS) != expected:
            raise OrderValidationError(
                f"Item {idx}: total_price {item['total_price']} does not match "
                f"unit_price x quantity ({expected})"
            )

        if product_id in seen_products:
            raise OrderValidationError(f"Item {idx}: duplicate product_id {product_id}")
        seen_products.add(product_id)


def validate_order_total(total_amount, items: List[Dict]) -> None:
    """The header total must equal the sum of the line totals."""
    line_sum = sum((Decimal(item['total_price']) for item in items), Decimal('0.00'))
    if Decimal(total_amount).quantize(CENTS) != line_sum.quantize(CENTS):
        raise OrderValidationError(
            f"total_amount {total_amount} does not match sum of line totals ({line_sum.quantize(CENTS)})"
        )


def validate_order_number(order_number: str) -> None:
    if not ORDER_NUMBER_PATTERN.match(order_number or ''):
        raise OrderValidationError(f"Invalid order number '{order_number}', expected PO-YYMMDD-NNNN")


def _decrement_stock(product: Product, quantity: int) -> None:
    """
    Take ``quantity`` units from a locked product row.

    Stock never goes negative: a shortfall raises and the surrounding
    transaction rolls back.
    """
    if product.stock_quantity < quantity:
        raise InsufficientStockError(product.id, product.name, quantity, product.stock_quantity)

    product.stock_quantity -= quantity
    product.save(update_fields=['stock_quantity', 'updated_at'])


def create_order(
    order_number: str,
    user_id: int,
    total_amount,
    items: List[Dict],
    status: Optional[str] = None,
    notes: Optional[str] = None,
) -> Result:
    """
    Create an order with its items and stock decrements atomically.

    Either the header, every line item and every stock decrement commit
    together, or nothing persists.

    Args:
        order_number: Client-generated PO-YYMMDD-NNNN number
        user_id: ID of the ordering account
        total_amount: Sum of line totals
        items: Line item dicts (see ``validate_order_items``)
        status: Initial status, defaults to pending
        notes: Optional free-text notes

    Returns:
        Success carrying the Order (items prefetched), or a Failure
    """
    status = status or Order.Status.PENDING

    try:
        validate_order_items(items)
        validate_order_total(total_amount, items)
        validate_order_number(order_number)
        if status not in Order.Status.values:
            raise OrderValidationError(f"Invalid status '{status}'")
    except OrderValidationError as e:
        logger.warning(f"Order {order_number} failed validation: {e}")
        return Failure(ErrorKind.VALIDATION, str(e))

    try:
        if Order.objects.filter(order_number=order_number).exists():
            raise DuplicateOrderNumberError(order_number)

        if not Account.objects.filter(id=user_id, is_active=True).exists():
            return Failure(ErrorKind.NOT_FOUND, f"User {user_id} not found or inactive")

        with transaction.atomic():
            order = Order.objects.create(
                order_number=order_number,
                user_id=user_id,
                status=status,
                total_amount=Decimal(total_amount).quantize(CENTS),
                notes=notes or ''
            )

            logger.info(f"Created order {order.order_number} (#{order.id}) for user {user_id}")

            # Lock product rows in id order to avoid deadlocks between orders
            product_ids = [item['product_id'] for item in items]
            products = {
                p.id: p for p in Product.objects.select_for_update().filter(
                    id__in=product_ids,
                    is_active=True
                ).order_by('id')
            }

            for item in items:
                product = products.get(item['product_id'])
                if product is None:
                    raise ProductNotFoundError(item['product_id'], item['product_name'])

                OrderItem.objects.create(
                    order=order,
                    product=product,
                    product_code=item['product_code'],
                    product_name=item['product_name'],
                    quantity=item['quantity'],
                    unit_price=Decimal(item['unit_price']).quantize(CENTS),
                    total_price=Decimal(item['total_price']).quantize(CENTS)
                )
                _decrement_stock(product, item['quantity'])

                logger.debug(
                    f"Order {order.order_number}: deducted {item['quantity']} of "
                    f"{product.product_code}, remaining stock: {product.stock_quantity}"
                )

            transaction.on_commit(partial(dispatch_order_notification, order.id))

    except DuplicateOrderNumberError as e:
        logger.warning(f"Order {order_number} rejected: {e}")
        return Failure(ErrorKind.CONFLICT, str(e))
    except InsufficientStockError as e:
        logger.warning(f"Order {order_number} rolled back: {e}")
        return Failure(ErrorKind.INSUFFICIENT_STOCK, str(e))
    except ProductNotFoundError as e:
        logger.warning(f"Order {order_number} rolled back: {e}")
        return Failure(ErrorKind.NOT_FOUND, str(e))
    except IntegrityError as e:
        logger.exception(f"Order {order_number} rolled back on integrity error: {e}")
        return Failure(ErrorKind.CONFLICT, "Order could not be saved: conflicting data")
    except DatabaseError as e:
        logger.exception(f"Order {order_number} rolled back on database error: {e}")
        return Failure(ErrorKind.TRANSACTION, "Order could not be saved, please try again")

    logger.info(
        f"Order {order.order_number} committed: {len(items)} items, "
        f"total {order.total_amount}"
    )

    try:
        order = Order.objects.select_related('user').prefetch_related('items').get(id=order.id)
    except DatabaseError as e:
        # Already committed; hand back the instance we have
        logger.error(f"Could not reload committed order {order.order_number}: {e}")
    return Success(order)


def update_order(order_id: int, status: Optional[str] = None, notes: Optional[str] = None) -> Result:
    """
    Admin update of an order's status and/or notes.

    Orders in a terminal status (delivered, cancelled) keep their status.
    """
    try:
        order = Order.objects.select_related('user').prefetch_related('items').get(id=order_id)
    except Order.DoesNotExist:
        return Failure(ErrorKind.NOT_FOUND, f"Order {order_id} not found")

    update_fields = []

    if status is not None and status != order.status:
        if order.is_terminal:
            return Failure(
                ErrorKind.CONFLICT,
                f"Order {order.order_number} is {order.status} and can no longer change status"
            )
        logger.info(f"Order {order.order_number}: status {order.status} -> {status}")
        order.status = status
        update_fields.append('status')

    if notes is not None:
        order.notes = notes
        update_fields.append('notes')

    if update_fields:
        order.save(update_fields=update_fields + ['updated_at'])

    return Success(order)


def get_order_stats() -> Dict:
    """
    Dashboard statistics over accounts, products and orders.

    Revenue counts every order that was not cancelled.
    """
    stats = Order.objects.aggregate(
        total_orders=Count('id'),
        total_revenue=Sum('total_amount', filter=~Q(status=Order.Status.CANCELLED)),
        **{
            f"{value}_orders": Count('id', filter=Q(status=value))
            for value in Order.Status.values
        }
    )

    stats['total_revenue'] = str((stats['total_revenue'] or Decimal('0')).quantize(CENTS))
    stats['total_users'] = Account.objects.filter(role=Account.Role.USER).count()
    stats['total_products'] = Product.objects.count()
    stats['low_stock_products'] = Product.objects.filter(
        stock_quantity__lt=settings.LOW_STOCK_THRESHOLD
    ).count()

    return stats
