"""
Order API Views.

Implements:
- GET /orders - Order history with items and customer summary
- POST /orders - Create order with atomic transaction
- GET /orders/{id} - Order detail with items
- PATCH /orders/{id} - Admin status / notes update
- GET /orders/stats - Dashboard statistics
"""
import logging
from rest_framework import generics, serializers
from rest_framework.views import APIView

from core.responses import envelope, result_response
from core.views import EnvelopeMixin
from .models import Order
from .serializers import (
    OrderSerializer,
    OrderCreateSerializer,
    OrderUpdateSerializer,
)
from .services import create_order, update_order, get_order_stats

logger = logging.getLogger(__name__)


def serialize_order(order):
    return OrderSerializer(order).data


class OrderListCreateView(EnvelopeMixin, generics.ListCreateAPIView):
    """
    GET: List orders, newest first, with items and customer summary
    POST: Create a new order with atomic transaction handling

    Query Parameters (GET):
        - user_id: Filter by ordering account
        - status: Filter by status

    Request Body (POST): see OrderCreateSerializer. Business failures such as
    insufficient stock come back as {"data": null, "error": "..."}.
    """
    serializer_class = OrderSerializer

    def get_queryset(self):
        queryset = Order.objects.select_related('user').prefetch_related('items')

        user_id = self.request.query_params.get('user_id')
        if user_id:
            if not user_id.isdigit():
                raise serializers.ValidationError({'user_id': 'A valid integer is required.'})
            queryset = queryset.filter(user_id=int(user_id))

        status_filter = self.request.query_params.get('status', '').lower()
        if status_filter in Order.Status.values:
            queryset = queryset.filter(status=status_filter)

        return queryset.order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = create_order(
            order_number=data['order_number'],
            user_id=data['user_id'],
            total_amount=data['total_amount'],
            items=[dict(item) for item in data['items']],
            status=data.get('status'),
            notes=data.get('notes')
        )
        if not result.ok:
            logger.warning(f"Order {data['order_number']} not created: {result.message}")

        return result_response(result, serialize_order)


class OrderDetailView(EnvelopeMixin, APIView):
    """
    GET: Retrieve an order with all items
    PATCH: Update status and/or notes
    """

    def get(self, request, pk):
        order = generics.get_object_or_404(
            Order.objects.select_related('user').prefetch_related('items'),
            pk=pk
        )
        return envelope(serialize_order(order))

    def patch(self, request, pk):
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = update_order(
            pk,
            status=serializer.validated_data.get('status'),
            notes=serializer.validated_data.get('notes')
        )
        return result_response(result, serialize_order)


class OrderStatsView(EnvelopeMixin, APIView):
    """
    GET: Dashboard statistics (order counts per status, revenue, users,
    products, low-stock products).
    """

    def get(self, request):
        return envelope(get_order_stats())
