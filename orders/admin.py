"""
Django Admin configuration for order models.
"""
from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['product', 'product_code', 'product_name', 'quantity', 'unit_price', 'total_price']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'order_number', 'user', 'status', 'total_amount', 'item_count', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['order_number', 'user__email', 'user__business_name']
    ordering = ['-created_at']
    readonly_fields = ['order_number', 'user', 'total_amount', 'created_at', 'updated_at']
    inlines = [OrderItemInline]

    def item_count(self, obj):
        return obj.items.count()
    item_count.short_description = 'Items'


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'product_code', 'product_name', 'quantity', 'unit_price', 'total_price']
    list_filter = ['order__status', 'created_at']
    search_fields = ['product_code', 'product_name', 'order__order_number']
    ordering = ['-created_at']
    raw_id_fields = ['order', 'product']
