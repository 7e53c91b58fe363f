from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_code', models.CharField(help_text='Unique business key used on order lines and in bulk imports', max_length=50, unique=True)),
                ('brand', models.CharField(db_index=True, max_length=100)),
                ('name', models.CharField(db_index=True, help_text='Product name for display and search', max_length=200)),
                ('width', models.PositiveIntegerField(blank=True, null=True)),
                ('aspect_ratio', models.PositiveIntegerField(blank=True, null=True)),
                ('rim_diameter', models.PositiveIntegerField(blank=True, null=True)),
                ('dimensions', models.CharField(help_text='Human-readable size, e.g. 205/55 R16', max_length=50)),
                ('tire_type', models.CharField(choices=[('car', 'Car'), ('truck', 'Truck'), ('suv', 'SUV'), ('van', 'Van')], default='car', max_length=10)),
                ('season', models.CharField(choices=[('summer', 'Summer'), ('winter', 'Winter'), ('all-season', 'All season')], default='all-season', max_length=12)),
                ('stock_quantity', models.PositiveIntegerField(default=0, help_text='Units currently available for ordering')),
                ('price', models.DecimalField(decimal_places=2, help_text='Unit price', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('description', models.TextField(blank=True, default='')),
                ('image_url', models.URLField(blank=True, default='', max_length=500)),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Whether product is available for ordering')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['brand', 'is_active'], name='catalog_brand_active_idx'),
                    models.Index(fields=['tire_type', 'season'], name='catalog_type_season_idx'),
                ],
            },
        ),
    ]
