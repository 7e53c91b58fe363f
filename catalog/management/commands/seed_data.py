"""
Management command to seed the database with sample data.

Generates:
- Tire products across brands, sizes, types and seasons
- One admin account and a set of business customer accounts
- Notification recipients for each role

Usage:
    python manage.py seed_data
    python manage.py seed_data --clear  # Clear existing data first
"""
import random
from decimal import Decimal
from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import Account
from catalog.models import Product
from notifications.models import NotificationRecipient


class Command(BaseCommand):
    help = 'Seed the database with sample tires, accounts and notification recipients'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before seeding',
        )
        parser.add_argument(
            '--products',
            type=int,
            default=200,
            help='Number of products to create (default: 200)',
        )
        parser.add_argument(
            '--customers',
            type=int,
            default=10,
            help='Number of customer accounts to create (default: 10)',
        )
        parser.add_argument(
            '--password',
            default='changeme123',
            help='Password for every seeded account (default: changeme123)',
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self._clear_data()

        self.stdout.write('Starting database seeding...')

        with transaction.atomic():
            self._create_accounts(options['customers'], options['password'])
            self._create_products(options['products'])
            self._create_recipients()

        self.stdout.write(self.style.SUCCESS('Database seeding completed successfully!'))

    def _clear_data(self):
        """Clear all existing data."""
        from orders.models import OrderItem, Order

        OrderItem.objects.all().delete()
        Order.objects.all().delete()
        Product.objects.all().delete()
        NotificationRecipient.objects.all().delete()
        Account.objects.all().delete()

        self.stdout.write(self.style.WARNING('All existing data cleared.'))

    def _create_accounts(self, count, password):
        """Create an admin and sample business customers."""
        admin, created = Account.objects.get_or_create(
            email='admin@tirehub.local',
            defaults={'role': Account.Role.ADMIN, 'business_name': 'TireHub'}
        )
        if created:
            admin.set_password(password)
            admin.save()
            self.stdout.write('  Created admin: admin@tirehub.local')

        towns = [
            'Northside', 'Riverside', 'Hillcrest', 'Lakeview', 'Old Town',
            'Harbor', 'Westgate', 'Eastfield', 'Southpark', 'Midtown',
            'Brookside', 'Fairview'
        ]
        kinds = ['Auto Service', 'Tire Center', 'Garage', 'Fleet Services', 'Motors']

        accounts = []
        for i in range(count):
            town = towns[i % len(towns)]
            account = Account(
                email=f"shop{i + 1}@example.com",
                role=Account.Role.USER,
                business_name=f"{town} {random.choice(kinds)}",
                business_number=f"BN{random.randint(100000, 999999)}",
                contact_person=f"Contact {i + 1}",
                phone=f"+1 555 {random.randint(1000000, 9999999)}",
                is_active=random.random() > 0.1  # 90% active
            )
            account.set_password(password)
            accounts.append(account)

        Account.objects.bulk_create(accounts, ignore_conflicts=True)
        self.stdout.write(self.style.SUCCESS(f'Created {len(accounts)} customer accounts'))

    def _create_products(self, count):
        """Create sample tire products with realistic sizes."""
        brands = {
            'Michelin': ['Primacy 4', 'Pilot Sport 5', 'CrossClimate 2', 'Alpin 6', 'Agilis 3'],
            'Continental': ['PremiumContact 7', 'WinterContact TS 870', 'AllSeasonContact 2', 'VanContact Ultra'],
            'Bridgestone': ['Turanza 6', 'Blizzak LM005', 'Weather Control A005', 'Duravis R660'],
            'Pirelli': ['Cinturato P7', 'Scorpion Verde', 'Sottozero 3', 'Carrier'],
            'Goodyear': ['EfficientGrip 2', 'UltraGrip 9+', 'Vector 4Seasons Gen-3', 'Wrangler AT'],
            'Hankook': ['Ventus Prime 4', 'Winter i*cept RS3', 'Kinergy 4S2', 'Vantra LT'],
        }
        widths = [175, 185, 195, 205, 215, 225, 235, 245, 255, 265]
        ratios = [40, 45, 50, 55, 60, 65, 70]
        rims = [14, 15, 16, 17, 18, 19, 20]

        products = []
        existing_codes = set()

        self.stdout.write(f'Creating {count} products...')

        for i in range(count):
            brand = random.choice(list(brands))
            model = random.choice(brands[brand])
            width = random.choice(widths)
            ratio = random.choice(ratios)
            rim = random.choice(rims)

            # Generate unique code
            for _ in range(10):
                code = f"{brand[:3].upper()}-{width}{ratio}{rim}-{random.randint(100, 999)}"
                if code not in existing_codes:
                    existing_codes.add(code)
                    break
            else:
                code = f"TIRE-{i + 1:05d}"
                existing_codes.add(code)

            lowered = model.lower()
            if 'winter' in lowered or 'alpin' in lowered or 'blizzak' in lowered or 'sottozero' in lowered:
                season = Product.Season.WINTER
            elif 'all' in lowered or 'climate' in lowered or 'season' in lowered or 'weather' in lowered:
                season = Product.Season.ALL_SEASON
            else:
                season = Product.Season.SUMMER

            if any(word in lowered for word in ('van', 'agilis', 'duravis', 'carrier', 'vantra')):
                tire_type = Product.TireType.VAN
            elif 'scorpion' in lowered or 'wrangler' in lowered:
                tire_type = Product.TireType.SUV
            else:
                tire_type = Product.TireType.CAR

            products.append(Product(
                product_code=code,
                brand=brand,
                name=model,
                width=width,
                aspect_ratio=ratio,
                rim_diameter=rim,
                dimensions=f"{width}/{ratio} R{rim}",
                tire_type=tire_type,
                season=season,
                stock_quantity=random.randint(0, 200),
                # Random price between 50 and 400
                price=Decimal(str(round(random.uniform(50, 400), 2))),
                is_active=random.random() > 0.05  # 95% active
            ))

            if (i + 1) % 100 == 0:
                self.stdout.write(f'  Created {i + 1} products...')

        Product.objects.bulk_create(products, ignore_conflicts=True)

        self.stdout.write(self.style.SUCCESS(f'Created {Product.objects.count()} products'))

    def _create_recipients(self):
        """Create one notification recipient per role."""
        for role in NotificationRecipient.Role:
            _, created = NotificationRecipient.objects.get_or_create(
                email=f"{role.value}@tirehub.local",
                defaults={'name': f"{role.label} team", 'role': role.value}
            )
            if created:
                self.stdout.write(f'  Created recipient: {role.value}@tirehub.local')
