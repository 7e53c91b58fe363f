"""
Catalog Models - Tire products offered to business customers.

Stock is tracked directly on the product. It is set by admin edits and
decremented only by order placement (see ``orders.services``).
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Product entity representing a tire model available for ordering.
    """

    class TireType(models.TextChoices):
        CAR = 'car', 'Car'
        TRUCK = 'truck', 'Truck'
        SUV = 'suv', 'SUV'
        VAN = 'van', 'Van'

    class Season(models.TextChoices):
        SUMMER = 'summer', 'Summer'
        WINTER = 'winter', 'Winter'
        ALL_SEASON = 'all-season', 'All season'

    product_code = models.CharField(
        max_length=50,
        unique=True,
        help_text="Unique business key used on order lines and in bulk imports"
    )
    brand = models.CharField(max_length=100, db_index=True)
    name = models.CharField(
        max_length=200,
        db_index=True,
        help_text="Product name for display and search"
    )
    width = models.PositiveIntegerField(null=True, blank=True)
    aspect_ratio = models.PositiveIntegerField(null=True, blank=True)
    rim_diameter = models.PositiveIntegerField(null=True, blank=True)
    dimensions = models.CharField(
        max_length=50,
        help_text="Human-readable size, e.g. 205/55 R16"
    )
    tire_type = models.CharField(
        max_length=10,
        choices=TireType.choices,
        default=TireType.CAR
    )
    season = models.CharField(
        max_length=12,
        choices=Season.choices,
        default=Season.ALL_SEASON
    )
    stock_quantity = models.PositiveIntegerField(
        default=0,
        help_text="Units currently available for ordering"
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Unit price"
    )
    description = models.TextField(blank=True, default='')
    image_url = models.URLField(max_length=500, blank=True, default='')
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether product is available for ordering"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['brand', 'is_active'], name='catalog_brand_active_idx'),
            models.Index(fields=['tire_type', 'season'], name='catalog_type_season_idx'),
        ]

    def __str__(self):
        return f"{self.product_code} {self.brand} {self.name} ({self.dimensions})"

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity < settings.LOW_STOCK_THRESHOLD

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_quantity == 0
