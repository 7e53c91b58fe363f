"""
Catalog API Views.

Implements:
- GET/POST /products - List (optionally filtered by is_active) and create
- POST /products/bulk - Upsert many products by product_code
- GET/PATCH/DELETE /products/{id} - Product detail
"""
from rest_framework import generics
from rest_framework.views import APIView

from core.responses import envelope
from core.views import EnvelopeMixin
from .models import Product
from .serializers import ProductSerializer, ProductBulkImportSerializer
from .services import import_products


class ProductListCreateView(EnvelopeMixin, generics.ListCreateAPIView):
    """
    GET: List products, newest first
    POST: Create a new product

    Query Parameters (GET):
        - is_active: true/false to filter by availability

    This is the stock source checkout re-validates against, so it always
    reads straight from the database.
    """
    serializer_class = ProductSerializer

    def get_queryset(self):
        queryset = Product.objects.all()

        is_active = self.request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        return queryset.order_by('-created_at', '-id')


class ProductDetailView(EnvelopeMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET: Retrieve a product
    PATCH: Update a product (including stock_quantity)
    DELETE: Delete a product

    Deleting a product keeps past order lines intact; they carry their own
    code, name and price snapshot.
    """
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']


class ProductBulkImportView(EnvelopeMixin, APIView):
    """
    POST: Create or overwrite products keyed by product_code.

    Request Body:
    {
        "products": [
            {"product_code": "MIC-2055516", "brand": "Michelin", ...},
            ...
        ]
    }
    """

    def post(self, request):
        serializer = ProductBulkImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        products = import_products(serializer.validated_data['products'])
        return envelope(ProductSerializer(products, many=True).data)
