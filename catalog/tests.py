"""
Tests for the catalog API and bulk import.
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework.test import APIClient

from catalog.models import Product
from catalog.services import import_products


def product_body(code, **overrides):
    return {
        'product_code': code,
        'brand': 'Pirelli',
        'name': 'Cinturato P7',
        'width': 205,
        'aspect_ratio': 55,
        'rim_diameter': 16,
        'dimensions': '205/55 R16',
        'tire_type': 'car',
        'season': 'summer',
        'stock_quantity': 40,
        'price': '89.90',
        **overrides,
    }


class ProductApiTestCase(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_create_and_list(self):
        created = self.client.post('/api/products', product_body('PIR-2055516'), format='json').json()

        self.assertIsNone(created['error'])
        self.assertEqual(created['data']['price'], '89.90')
        self.assertTrue(created['data']['is_active'])

        listing = self.client.get('/api/products').json()
        self.assertEqual([p['product_code'] for p in listing['data']], ['PIR-2055516'])

    def test_is_active_filter(self):
        self.client.post('/api/products', product_body('ACTIVE'), format='json')
        self.client.post('/api/products', product_body('HIDDEN', is_active=False), format='json')

        active = self.client.get('/api/products', {'is_active': 'true'}).json()['data']
        inactive = self.client.get('/api/products', {'is_active': 'false'}).json()['data']

        self.assertEqual([p['product_code'] for p in active], ['ACTIVE'])
        self.assertEqual([p['product_code'] for p in inactive], ['HIDDEN'])

    def test_negative_stock_rejected(self):
        body = self.client.post(
            '/api/products', product_body('NEG', stock_quantity=-1), format='json'
        ).json()

        self.assertIsNone(body['data'])
        self.assertIn('stock_quantity', body['error'])

    def test_duplicate_code_rejected(self):
        self.client.post('/api/products', product_body('DUP'), format='json')
        body = self.client.post('/api/products', product_body('DUP'), format='json').json()

        self.assertIsNone(body['data'])
        self.assertIn('product_code', body['error'])

    def test_stock_update_visible_on_next_read(self):
        """
        Test: Admin stock edits are visible immediately on the listing
        checkout re-validates against.
        """
        product_id = self.client.post('/api/products', product_body('EDIT'), format='json').json()['data']['id']

        self.client.patch(f'/api/products/{product_id}', {'stock_quantity': 4}, format='json')

        listing = self.client.get('/api/products', {'is_active': 'true'}).json()['data']
        self.assertEqual(listing[0]['stock_quantity'], 4)

    def test_delete(self):
        product_id = self.client.post('/api/products', product_body('DEL'), format='json').json()['data']['id']

        body = self.client.delete(f'/api/products/{product_id}').json()

        self.assertEqual(body['data'], {'success': True})
        self.assertFalse(Product.objects.filter(id=product_id).exists())

    def test_missing_product(self):
        body = self.client.get('/api/products/99999').json()

        self.assertIsNone(body['data'])
        self.assertIsNotNone(body['error'])


class BulkImportTestCase(TestCase):

    def setUp(self):
        self.client = APIClient()
        Product.objects.create(
            product_code='EXISTING',
            brand='Old',
            name='Old Name',
            dimensions='195/65 R15',
            price=Decimal('50.00'),
            stock_quantity=1
        )

    def test_upsert_by_product_code(self):
        body = self.client.post('/api/products/bulk', {
            'products': [
                product_body('EXISTING', stock_quantity=25, price='60.00'),
                product_body('NEW-1'),
            ]
        }, format='json').json()

        self.assertIsNone(body['error'])
        self.assertEqual(len(body['data']), 2)
        self.assertEqual(Product.objects.count(), 2)

        existing = Product.objects.get(product_code='EXISTING')
        self.assertEqual(existing.brand, 'Pirelli')
        self.assertEqual(existing.stock_quantity, 25)
        self.assertEqual(existing.price, Decimal('60.00'))

    def test_duplicate_codes_in_payload_rejected(self):
        body = self.client.post('/api/products/bulk', {
            'products': [product_body('A'), product_body('A')]
        }, format='json').json()

        self.assertIsNone(body['data'])
        self.assertIn('Duplicate', body['error'])

    def test_import_is_all_or_nothing(self):
        rows = [
            {'product_code': 'OK-1', 'brand': 'B', 'name': 'N', 'dimensions': 'D', 'price': Decimal('1.00')},
            {'product_code': 'BAD', 'brand': 'B', 'name': 'N', 'dimensions': 'D', 'price': None},
        ]

        with self.assertRaises(Exception):
            import_products(rows)

        self.assertFalse(Product.objects.filter(product_code='OK-1').exists())
