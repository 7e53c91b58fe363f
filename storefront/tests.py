"""
Tests for the storefront cart and checkout workflow.

Test Cases:
1. Cart quantities are clamped to the product snapshot's stock
2. The cart survives a restart through its storage
3. Checkout places the order and clears the cart
4. Checkout aborts on stale stock and leaves the cart untouched
5. Network failures surface as transport errors
"""
import json
import random
import re
import tempfile
import unittest
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import requests
from django.test import TestCase
from rest_framework.test import RequestsClient

from accounts.models import Account
from catalog.models import Product
from core.result import ErrorKind
from orders.models import Order
from storefront import (
    Cart,
    CheckoutWorkflow,
    JsonFileCartStorage,
    MemoryCartStorage,
    ProductSnapshot,
    StorefrontClient,
    generate_order_number,
)


def snapshot(product_id=1, stock=5, price='100.00', **kwargs):
    return ProductSnapshot(
        id=product_id,
        product_code=kwargs.pop('product_code', f'TIRE-{product_id}'),
        name=kwargs.pop('name', f'Tire {product_id}'),
        price=Decimal(price),
        stock_quantity=stock,
        **kwargs
    )


class CartQuantityTestCase(unittest.TestCase):

    def setUp(self):
        self.cart = Cart(MemoryCartStorage())
        self.product = snapshot(stock=5)

    def test_add_clamps_to_stock(self):
        self.assertTrue(self.cart.add(self.product, 3))
        self.assertTrue(self.cart.add(self.product, 4))
        self.assertEqual(self.cart.quantity_for(self.product.id), 5)

        # Already at the limit
        self.assertFalse(self.cart.add(self.product, 1))
        self.assertEqual(self.cart.quantity_for(self.product.id), 5)

    def test_new_line_clamped(self):
        self.assertTrue(self.cart.add(self.product, 8))
        self.assertEqual(self.cart.quantity_for(self.product.id), 5)

    def test_add_nothing_or_out_of_stock(self):
        self.assertFalse(self.cart.add(self.product, 0))
        self.assertFalse(self.cart.add(snapshot(product_id=2, stock=0), 1))
        self.assertEqual(len(self.cart), 0)

    def test_add_refreshes_snapshot(self):
        self.cart.add(self.product, 2)
        self.cart.add(self.product.with_stock(10), 6)

        item = self.cart.items[0]
        self.assertEqual(item.quantity, 8)
        self.assertEqual(item.product.stock_quantity, 10)

    def test_add_with_lower_stock_trims_line(self):
        """
        Test: Adding against a fresher snapshot with less stock.

        Given: 5 units in the cart while stock was 10
        When: Adding 1 more after stock dropped to 3
        Then: Nothing is added, the line shrinks to 3 and later edits
              are bounded by the new stock
        """
        product = snapshot(stock=10)
        self.cart.add(product, 5)

        self.assertFalse(self.cart.add(product.with_stock(3), 1))

        item = self.cart.items[0]
        self.assertEqual(item.quantity, 3)
        self.assertEqual(item.product.stock_quantity, 3)
        self.assertEqual(self.cart.storage.snapshot[0]['quantity'], 3)
        self.assertFalse(self.cart.update_quantity(product.id, 4))
        self.assertEqual(self.cart.set_quantity_with_auto_correct(product.id, 9), 3)

    def test_add_with_sold_out_snapshot_drops_line(self):
        self.cart.add(self.product, 2)

        self.assertFalse(self.cart.add(self.product.with_stock(0), 1))
        self.assertEqual(len(self.cart), 0)

    def test_one_line_per_product(self):
        self.cart.add(self.product, 1)
        self.cart.add(self.product, 1)
        self.cart.add(snapshot(product_id=2), 1)

        self.assertEqual(len(self.cart), 2)
        self.assertEqual(self.cart.count(), 3)

    def test_available_stock(self):
        self.cart.add(self.product, 2)

        self.assertEqual(self.cart.available_stock(self.product), 3)
        self.assertEqual(self.cart.available_stock(snapshot(product_id=9, stock=4)), 4)

    def test_update_quantity(self):
        self.cart.add(self.product, 2)

        self.assertFalse(self.cart.update_quantity(self.product.id, 6))
        self.assertEqual(self.cart.quantity_for(self.product.id), 2)

        self.assertTrue(self.cart.update_quantity(self.product.id, 5))
        self.assertEqual(self.cart.quantity_for(self.product.id), 5)

        self.assertFalse(self.cart.update_quantity(404, 1))

    def test_update_quantity_zero_removes_line(self):
        self.cart.add(self.product, 2)

        self.assertTrue(self.cart.update_quantity(self.product.id, 0))
        self.assertEqual(len(self.cart), 0)

    def test_auto_correct(self):
        self.cart.add(self.product, 2)

        self.assertEqual(self.cart.set_quantity_with_auto_correct(self.product.id, 99), 5)
        self.assertEqual(self.cart.set_quantity_with_auto_correct(self.product.id, 0), 1)
        self.assertEqual(self.cart.set_quantity_with_auto_correct(self.product.id, -3), 1)
        self.assertEqual(self.cart.set_quantity_with_auto_correct(404, 2), 0)

    def test_auto_correct_drops_sold_out_line(self):
        storage = MemoryCartStorage([{'product': snapshot(stock=0).to_dict(), 'quantity': 1}])
        cart = Cart(storage)

        self.assertEqual(cart.set_quantity_with_auto_correct(1, 3), 0)
        self.assertEqual(len(cart), 0)

    def test_quantity_must_be_int(self):
        with self.assertRaises(TypeError):
            self.cart.add(self.product, 1.5)
        with self.assertRaises(TypeError):
            self.cart.add(self.product, True)
        with self.assertRaises(TypeError):
            self.cart.update_quantity(self.product.id, '2')

    def test_total_and_clear(self):
        self.cart.add(self.product, 2)
        self.cart.add(snapshot(product_id=2, price='15.50'), 3)

        self.assertEqual(self.cart.total(), Decimal('246.50'))

        self.cart.clear()
        self.cart.clear()
        self.assertEqual(len(self.cart), 0)
        self.assertEqual(self.cart.total(), Decimal('0.00'))

    def test_items_are_copies(self):
        self.cart.add(self.product, 2)

        self.cart.items[0].quantity = 50

        self.assertEqual(self.cart.quantity_for(self.product.id), 2)

    def test_refresh(self):
        self.cart.add(snapshot(product_id=1, stock=10), 8)
        self.cart.add(snapshot(product_id=2, stock=10), 1)
        self.cart.add(snapshot(product_id=3, stock=10), 1)

        changed = self.cart.refresh([
            snapshot(product_id=1, stock=4),
            snapshot(product_id=2, stock=10, is_active=False),
        ])

        self.assertEqual(sorted(changed), [1, 2, 3])
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.cart.quantity_for(1), 4)


class CartPersistenceTestCase(unittest.TestCase):

    def test_every_mutation_is_saved(self):
        storage = MemoryCartStorage()
        cart = Cart(storage)

        cart.add(snapshot(), 2)
        cart.update_quantity(1, 3)
        cart.remove(1)

        self.assertEqual(storage.save_count, 3)

    def test_restored_from_memory_storage(self):
        storage = MemoryCartStorage()
        Cart(storage).add(snapshot(price='89.90'), 2)

        restored = Cart(storage)

        self.assertEqual(restored.quantity_for(1), 2)
        self.assertEqual(restored.items[0].product.price, Decimal('89.90'))

    def test_restored_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'cart.json'
            Cart(JsonFileCartStorage(path)).add(snapshot(), 3)

            restored = Cart(JsonFileCartStorage(path))

            self.assertEqual(restored.quantity_for(1), 3)
            self.assertEqual(json.loads(path.read_text())[0]['quantity'], 3)

    def test_unreadable_file_discarded(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'cart.json'
            path.write_text('{not json')

            cart = Cart(JsonFileCartStorage(path))

            self.assertEqual(len(cart), 0)
            self.assertFalse(path.exists())

    def test_corrupt_entries_reset_cart(self):
        storage = MemoryCartStorage([{'product': {'id': 1}, 'quantity': 2}])

        cart = Cart(storage)

        self.assertEqual(len(cart), 0)
        self.assertEqual(storage.snapshot, [])


class OrderNumberTestCase(unittest.TestCase):

    def test_format(self):
        number = generate_order_number(date(2024, 3, 9), random.Random(1))

        self.assertRegex(number, r'^PO-240309-\d{4}$')

    def test_suffix_is_zero_padded(self):
        rng = Mock()
        rng.randrange.return_value = 7

        self.assertEqual(generate_order_number(date(2024, 1, 1), rng), 'PO-240101-0007')


class CheckoutWorkflowTestCase(TestCase):
    """Checkout against the in-process API over a requests-compatible session."""

    def setUp(self):
        self.customer = Account(email='shop@example.com', business_name='Test Garage')
        self.customer.set_password('secret123')
        self.customer.save()

        self.tire_a = Product.objects.create(
            product_code='MIC-2055516', brand='Michelin', name='Primacy 4',
            dimensions='205/55 R16', price=Decimal('100.00'), stock_quantity=10
        )
        self.tire_b = Product.objects.create(
            product_code='PIR-1956515', brand='Pirelli', name='Cinturato P7',
            dimensions='195/65 R15', price=Decimal('15.50'), stock_quantity=20
        )

        self.client = StorefrontClient('http://testserver', session=RequestsClient())
        self.cart = Cart(MemoryCartStorage())
        self.checkout = CheckoutWorkflow(
            self.client, self.cart, today=lambda: date(2024, 1, 1), rng=random.Random(42)
        )

    def fill_cart(self):
        listing = self.client.list_product_snapshots(is_active=True).data
        products = {p.id: p for p in listing}
        self.cart.add(products[self.tire_a.id], 10)
        self.cart.add(products[self.tire_b.id], 2)

    def test_successful_checkout(self):
        self.fill_cart()

        result = self.checkout.submit(self.customer.id, notes='Back entrance')

        self.assertTrue(result.ok)
        self.assertRegex(result.data.order_number, r'^PO-240101-\d{4}$')
        self.assertEqual(result.data.order['total_amount'], '1031.00')
        self.assertEqual(len(self.cart), 0)

        order = Order.objects.get(order_number=result.data.order_number)
        self.assertEqual(order.status, Order.Status.PENDING)
        self.assertEqual(order.notes, 'Back entrance')
        self.assertEqual(order.items.count(), 2)

        self.tire_a.refresh_from_db()
        self.tire_b.refresh_from_db()
        self.assertEqual(self.tire_a.stock_quantity, 0)
        self.assertEqual(self.tire_b.stock_quantity, 18)

    def test_stale_stock_aborts_checkout(self):
        """
        Test: Stock dropped after the product was added.

        Cart holds 10 but only 4 remain, so nothing is submitted.
        """
        self.fill_cart()
        Product.objects.filter(id=self.tire_a.id).update(stock_quantity=4)

        result = self.checkout.submit(self.customer.id)

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.INSUFFICIENT_STOCK)
        self.assertIn('Primacy 4', result.message)
        self.assertIn('available: 4', result.message)

        self.assertEqual(self.cart.quantity_for(self.tire_a.id), 10)
        self.assertEqual(self.cart.quantity_for(self.tire_b.id), 2)
        self.assertFalse(Order.objects.exists())

        self.tire_b.refresh_from_db()
        self.assertEqual(self.tire_b.stock_quantity, 20)

    def test_deactivated_product_aborts_checkout(self):
        self.fill_cart()
        Product.objects.filter(id=self.tire_b.id).update(is_active=False)

        result = self.checkout.submit(self.customer.id)

        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertIn('no longer available', result.message)
        self.assertEqual(len(self.cart), 2)

    def test_server_rejection_keeps_cart(self):
        self.fill_cart()
        Account.objects.filter(id=self.customer.id).update(is_active=False)

        result = self.checkout.submit(self.customer.id)

        self.assertFalse(result.ok)
        self.assertEqual(len(self.cart), 2)
        self.assertFalse(Order.objects.exists())

    def test_empty_cart(self):
        result = self.checkout.submit(self.customer.id)

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertFalse(Order.objects.exists())

    def test_submit_while_submitting(self):
        self.fill_cart()
        self.checkout.submitting = True

        result = self.checkout.submit(self.customer.id)

        self.assertEqual(result.message, 'Checkout already in progress')
        self.assertEqual(len(self.cart), 2)

    def test_request_body(self):
        self.fill_cart()

        body = self.checkout.build_order_request(self.customer.id, 'PO-240101-0001')

        self.assertEqual(body['status'], 'pending')
        self.assertEqual(body['total_amount'], '1031.00')
        self.assertIsNone(body['notes'])
        self.assertEqual(body['items'][1], {
            'product_id': self.tire_b.id,
            'product_code': 'PIR-1956515',
            'product_name': 'Cinturato P7',
            'quantity': 2,
            'unit_price': '15.50',
            'total_price': '31.00',
        })


class StorefrontClientTestCase(TestCase):
    """Account and order-history calls against the in-process API."""

    def setUp(self):
        self.customer = Account(email='shop@example.com', business_name='Test Garage')
        self.customer.set_password('secret123')
        self.customer.save()
        self.other = Account(email='other@example.com', business_name='Other Garage')
        self.other.set_password('secret123')
        self.other.save()

        self.order = Order.objects.create(
            order_number='PO-240101-0001', user=self.customer, total_amount=Decimal('10.00')
        )
        Order.objects.create(
            order_number='PO-240101-0002', user=self.other, total_amount=Decimal('20.00')
        )

        self.client = StorefrontClient('http://testserver', session=RequestsClient())

    def test_login(self):
        result = self.client.login('Shop@Example.com', 'secret123')

        self.assertTrue(result.ok)
        self.assertEqual(result.data['id'], self.customer.id)
        self.assertNotIn('password_hash', result.data)

    def test_login_failure_is_authentication_error(self):
        result = self.client.login('shop@example.com', 'wrong')

        self.assertEqual(result.kind, ErrorKind.AUTHENTICATION)
        self.assertEqual(result.message, 'Invalid credentials')

    def test_list_orders_for_user(self):
        mine = self.client.list_orders(self.customer.id)
        everything = self.client.list_orders()

        self.assertEqual([o['order_number'] for o in mine.data], ['PO-240101-0001'])
        self.assertEqual(len(everything.data), 2)

    def test_update_order(self):
        result = self.client.update_order(self.order.id, status='confirmed', notes='Call first')

        self.assertTrue(result.ok)
        self.assertEqual(result.data['status'], 'confirmed')
        self.order.refresh_from_db()
        self.assertEqual(self.order.notes, 'Call first')

    def test_update_terminal_order(self):
        Order.objects.filter(id=self.order.id).update(status=Order.Status.CANCELLED)

        result = self.client.update_order(self.order.id, status='pending')

        self.assertFalse(result.ok)
        self.assertIn('cancelled', result.message)


class CheckoutTransportFailureTestCase(unittest.TestCase):

    def test_unreachable_server(self):
        session = Mock()
        session.request.side_effect = requests.ConnectionError('connection refused')
        cart = Cart(MemoryCartStorage())
        cart.add(snapshot(stock=5), 2)

        result = CheckoutWorkflow(StorefrontClient('http://offline', session=session), cart).submit(1)

        self.assertEqual(result.kind, ErrorKind.TRANSPORT)
        self.assertEqual(result.message, 'Could not validate stock')
        self.assertEqual(cart.quantity_for(1), 2)

    def test_non_json_response(self):
        response = Mock(status_code=502)
        response.json.side_effect = ValueError('no json')
        session = Mock()
        session.request.return_value = response

        result = StorefrontClient('http://offline', session=session).list_products()

        self.assertEqual(result.kind, ErrorKind.TRANSPORT)
        self.assertIn('502', result.message)
