"""
Order Models - Order and OrderItem entities with status tracking.

Order Status Flow:
    PENDING -> CONFIRMED / PROCESSING -> SHIPPED -> DELIVERED
    any non-terminal status -> CANCELLED
    DELIVERED and CANCELLED are terminal.
"""
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator

from accounts.models import Account
from catalog.models import Product


class Order(models.Model):
    """
    Purchase order placed by a business customer.

    The header and all of its line items are created in one transaction
    together with the stock decrements (see ``orders.services``). After
    creation only ``status`` and ``notes`` change.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        CONFIRMED = 'confirmed', 'Confirmed'
        PROCESSING = 'processing', 'Processing'
        SHIPPED = 'shipped', 'Shipped'
        DELIVERED = 'delivered', 'Delivered'
        CANCELLED = 'cancelled', 'Cancelled'

    TERMINAL_STATUSES = (Status.DELIVERED, Status.CANCELLED)

    order_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Human-readable number, PO-YYMMDD-NNNN"
    )
    user = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name='orders',
        help_text="Customer who placed the order"
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
        help_text="Current order status"
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Sum of line totals"
    )
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='orders_user_status_idx'),
            models.Index(fields=['status', 'created_at'], name='orders_status_created_idx'),
        ]

    def __str__(self):
        return f"{self.order_number} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    @property
    def item_count(self) -> int:
        return self.items.count()


class OrderItem(models.Model):
    """
    One product line within an order.

    Code, name and prices are a snapshot taken when the order was placed and
    are never re-derived from the product afterwards.
    """
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        help_text="Parent order"
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        related_name='order_items',
        help_text="Ordered product; cleared if the product is later deleted"
    )
    product_code = models.CharField(max_length=50)
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity ordered"
    )
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Price per unit at time of order"
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="unit_price * quantity at time of order"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Order Item'
        verbose_name_plural = 'Order Items'
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity}x {self.product_code} @ {self.unit_price}"
