"""
Serializers for catalog models.
Provides data validation and JSON conversion for API endpoints.
"""
from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model."""
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'product_code', 'brand', 'name',
            'width', 'aspect_ratio', 'rim_diameter', 'dimensions',
            'tire_type', 'season', 'stock_quantity', 'price',
            'description', 'image_url', 'is_active', 'is_low_stock',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class ProductImportSerializer(serializers.ModelSerializer):
    """
    Serializer for one row of a bulk import.

    ``product_code`` uniqueness is not validated here because existing codes
    are updated in place.
    """
    product_code = serializers.CharField(max_length=50)

    class Meta:
        model = Product
        fields = [
            'product_code', 'brand', 'name',
            'width', 'aspect_ratio', 'rim_diameter', 'dimensions',
            'tire_type', 'season', 'stock_quantity', 'price',
            'description', 'image_url', 'is_active'
        ]


class ProductBulkImportSerializer(serializers.Serializer):
    products = ProductImportSerializer(many=True)

    def validate_products(self, value):
        if not value:
            raise serializers.ValidationError("At least one product is required")

        codes = [row['product_code'] for row in value]
        if len(codes) != len(set(codes)):
            raise serializers.ValidationError("Duplicate product codes in import")

        return value
