"""
Django Admin configuration for catalog models.
"""
from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'product_code', 'brand', 'name', 'dimensions',
        'price', 'stock_quantity', 'is_low_stock', 'is_active'
    ]
    list_filter = ['tire_type', 'season', 'brand', 'is_active']
    search_fields = ['product_code', 'brand', 'name', 'dimensions']
    ordering = ['-created_at']

    def is_low_stock(self, obj):
        return obj.is_low_stock
    is_low_stock.boolean = True
    is_low_stock.short_description = 'Low Stock'
