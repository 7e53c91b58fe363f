"""
Serializers for order models.
"""
from decimal import Decimal

from rest_framework import serializers
from .models import Order, OrderItem
from accounts.serializers import AccountSummarySerializer


class OrderItemSerializer(serializers.ModelSerializer):
    """Serializer for an OrderItem snapshot."""
    product_id = serializers.IntegerField(read_only=True, allow_null=True)
    order_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'order_id', 'product_id', 'product_code', 'product_name',
            'quantity', 'unit_price', 'total_price', 'created_at'
        ]


class OrderItemCreateSerializer(serializers.Serializer):
    """Serializer for one line item in an order creation request."""
    product_id = serializers.IntegerField(min_value=1)
    product_code = serializers.CharField(max_length=50)
    product_name = serializers.CharField(max_length=200)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'))
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))


class OrderSerializer(serializers.ModelSerializer):
    """
    Serializer for Order with nested items and customer summary.
    Expects select_related('user') and prefetch_related('items').
    """
    user_id = serializers.IntegerField(read_only=True)
    user = AccountSummarySerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'user_id', 'status', 'total_amount',
            'notes', 'created_at', 'updated_at', 'items', 'user'
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """
    Serializer for creating orders via POST /orders

    Request format:
    {
        "order_number": "PO-240101-0007",
        "user_id": 1,
        "status": "pending",
        "total_amount": "25.00",
        "notes": null,
        "items": [
            {"product_id": 1, "product_code": "X", "product_name": "...",
             "quantity": 2, "unit_price": "10.00", "total_price": "20.00"}
        ]
    }
    """
    order_number = serializers.CharField(max_length=20)
    user_id = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=Order.Status.choices, required=False, allow_null=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    items = OrderItemCreateSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required")
        return value


class OrderUpdateSerializer(serializers.Serializer):
    """PATCH /orders/{id}: only status and notes may change."""
    status = serializers.ChoiceField(choices=Order.Status.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
