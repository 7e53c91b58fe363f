"""
Tests for order transaction logic.

Test Cases:
1. Order committed with items and stock decrements
2. Order rolled back on insufficient stock
3. No partial order or decrement when a later line fails
4. Request validation (items, totals, order number, user)
5. Notification dispatched only after commit
6. Admin status updates and terminal states
7. API envelope for create, list, update and stats
"""
from decimal import Decimal
from django.db import DatabaseError, OperationalError, connection
from django.test import TestCase, TransactionTestCase
from rest_framework.test import APIClient
from unittest.mock import patch
import threading

from accounts.models import Account
from catalog.models import Product
from core.result import ErrorKind, Failure, Success
from orders import services
from orders.models import Order, OrderItem
from orders.services import create_order, get_order_stats, update_order


def make_account(email='shop@example.com', **kwargs):
    account = Account(email=email, business_name=kwargs.pop('business_name', 'Test Garage'), **kwargs)
    account.set_password('secret123')
    account.save()
    return account


def make_product(code, price, stock, **kwargs):
    return Product.objects.create(
        product_code=code,
        brand=kwargs.pop('brand', 'Michelin'),
        name=kwargs.pop('name', f'Tire {code}'),
        dimensions=kwargs.pop('dimensions', '205/55 R16'),
        price=Decimal(price),
        stock_quantity=stock,
        **kwargs
    )


def line(product, quantity, unit_price=None):
    unit_price = Decimal(unit_price) if unit_price is not None else product.price
    return {
        'product_id': product.id,
        'product_code': product.product_code,
        'product_name': product.name,
        'quantity': quantity,
        'unit_price': unit_price,
        'total_price': unit_price * quantity,
    }


def total_of(items):
    return sum((item['total_price'] for item in items), Decimal('0.00'))


class OrderTransactionTestCase(TestCase):
    """Test cases for order transaction logic."""

    def setUp(self):
        """Set up test data."""
        self.customer = make_account()
        self.product_x = make_product('X', '10.00', 100)
        self.product_y = make_product('Y', '5.00', 50)
        self.product_z = make_product('Z', '15.50', 10)  # Low stock

    def place(self, items, order_number='PO-240101-0007', **kwargs):
        return create_order(
            order_number=order_number,
            user_id=kwargs.pop('user_id', self.customer.id),
            total_amount=kwargs.pop('total_amount', total_of(items)),
            items=items,
            **kwargs
        )

    def test_order_committed_with_items_and_stock(self):
        """
        Test: Order with two lines commits header, items and decrements.

        Given: X at 10.00 (stock 100) and Y at 5.00 (stock 50)
        When: Ordering 2 x X and 1 x Y as PO-240101-0007
        Then: Total is 25.00, two items exist, X drops by 2 and Y by 1
        """
        result = self.place([line(self.product_x, 2), line(self.product_y, 1)])

        self.assertTrue(result.ok)
        order = result.data
        self.assertEqual(order.order_number, 'PO-240101-0007')
        self.assertEqual(order.status, Order.Status.PENDING)
        self.assertEqual(order.total_amount, Decimal('25.00'))
        self.assertEqual(order.items.count(), 2)

        self.product_x.refresh_from_db()
        self.product_y.refresh_from_db()
        self.assertEqual(self.product_x.stock_quantity, 98)
        self.assertEqual(self.product_y.stock_quantity, 49)

    def test_total_equals_sum_of_item_totals(self):
        """Test: Stored total equals the sum of stored line totals exactly."""
        result = self.place([
            line(self.product_x, 3),
            line(self.product_y, 7),
            line(self.product_z, 2),
        ])

        order = result.data
        item_sum = sum((item.total_price for item in order.items.all()), Decimal('0.00'))
        self.assertEqual(order.total_amount, item_sum)
        self.assertEqual(order.total_amount, Decimal('96.00'))

    def test_order_items_snapshot_product_fields(self):
        """
        Test: Line items keep the code, name and price given at order time.
        """
        result = self.place([line(self.product_x, 1, unit_price='9.50')])
        self.product_x.name = 'Renamed Tire'
        self.product_x.price = Decimal('99.00')
        self.product_x.save()

        item = result.data.items.get()
        item.refresh_from_db()
        self.assertEqual(item.product_name, 'Tire X')
        self.assertEqual(item.unit_price, Decimal('9.50'))
        self.assertEqual(item.total_price, Decimal('9.50'))

    def test_order_rolled_back_on_insufficient_stock(self):
        """
        Test: Order is rolled back when any line lacks stock.

        Given: Z has only 10 units
        When: Requesting 5 x X and 15 x Z
        Then: Failure names Z and the available quantity; nothing changes
        """
        result = self.place([line(self.product_x, 5), line(self.product_z, 15)])

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.INSUFFICIENT_STOCK)
        self.assertIn('Tire Z', result.message)
        self.assertIn('available: 10', result.message)

        self.assertFalse(Order.objects.filter(order_number='PO-240101-0007').exists())
        self.assertEqual(OrderItem.objects.count(), 0)
        self.product_x.refresh_from_db()
        self.product_z.refresh_from_db()
        self.assertEqual(self.product_x.stock_quantity, 100)
        self.assertEqual(self.product_z.stock_quantity, 10)

    def test_failure_after_second_item_rolls_back_everything(self):
        """
        Test: A failure on the 3rd of 5 lines leaves no trace.

        Given: Five products with known stock
        When: The stock decrement for the third line raises a database error
        Then: No order, no order items and no stock changes persist
        """
        extra_1 = make_product('P4', '20.00', 30)
        extra_2 = make_product('P5', '30.00', 40)
        products = [self.product_x, self.product_y, self.product_z, extra_1, extra_2]
        original_stock = {p.id: p.stock_quantity for p in products}
        items = [line(p, 1) for p in products]

        real_decrement = services._decrement_stock
        calls = []

        def failing_decrement(product, quantity):
            calls.append(product.id)
            if len(calls) == 3:
                raise DatabaseError('simulated failure')
            return real_decrement(product, quantity)

        with patch('orders.services._decrement_stock', side_effect=failing_decrement):
            result = self.place(items, order_number='PO-240101-0099')

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.TRANSACTION)
        self.assertEqual(len(calls), 3)

        self.assertEqual(Order.objects.filter(order_number='PO-240101-0099').count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)
        for product in products:
            product.refresh_from_db()
            self.assertEqual(product.stock_quantity, original_stock[product.id])

    def test_order_with_exact_stock(self):
        """
        Test: Order succeeds when requesting exactly available stock.
        """
        result = self.place([line(self.product_z, 10)])

        self.assertTrue(result.ok)
        self.product_z.refresh_from_db()
        self.assertEqual(self.product_z.stock_quantity, 0)

    def test_inactive_product_is_not_orderable(self):
        """
        Test: A deactivated product fails the order and nothing persists.
        """
        self.product_y.is_active = False
        self.product_y.save()

        result = self.place([line(self.product_x, 1), line(self.product_y, 1)])

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(Order.objects.count(), 0)
        self.product_x.refresh_from_db()
        self.assertEqual(self.product_x.stock_quantity, 100)

    def test_explicit_status_is_kept(self):
        result = self.place([line(self.product_x, 1)], status=Order.Status.CONFIRMED, notes='Deliver Monday')

        self.assertEqual(result.data.status, Order.Status.CONFIRMED)
        self.assertEqual(result.data.notes, 'Deliver Monday')

    def test_validation_error_empty_items(self):
        """
        Test: Validation fails for empty items list.
        """
        result = self.place([], total_amount=Decimal('0.00'))

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertIn('at least one item', result.message)

    def test_validation_error_invalid_quantity(self):
        """
        Test: Validation fails for invalid quantity.
        """
        item = line(self.product_x, 1)
        item['quantity'] = 0
        item['total_price'] = Decimal('0.00')

        result = self.place([item])

        self.assertEqual(result.kind, ErrorKind.VALIDATION)

    def test_validation_error_duplicate_products(self):
        """
        Test: Validation fails for duplicate products in same order.
        """
        result = self.place([line(self.product_x, 5), line(self.product_x, 3)])

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertIn('duplicate', result.message.lower())

    def test_validation_error_total_mismatch(self):
        """
        Test: Header total must equal the sum of the line totals.
        """
        result = self.place([line(self.product_x, 2)], total_amount=Decimal('25.00'))

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertIn('total_amount', result.message)
        self.assertEqual(Order.objects.count(), 0)

    def test_validation_error_line_total_mismatch(self):
        item = line(self.product_x, 2)
        item['total_price'] = Decimal('19.00')

        result = self.place([item])

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertIn('total_price', result.message)

    def test_validation_error_bad_order_number(self):
        result = self.place([line(self.product_x, 1)], order_number='ORDER-1')

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertIn('PO-YYMMDD-NNNN', result.message)

    def test_duplicate_order_number_rejected(self):
        self.assertTrue(self.place([line(self.product_x, 1)]).ok)

        result = self.place([line(self.product_y, 1)])

        self.assertEqual(result.kind, ErrorKind.CONFLICT)
        self.assertIn('already exists', result.message)
        self.product_y.refresh_from_db()
        self.assertEqual(self.product_y.stock_quantity, 50)

    def test_order_inactive_user(self):
        """
        Test: Order fails for a disabled account.
        """
        self.customer.is_active = False
        self.customer.save()

        result = self.place([line(self.product_x, 1)])

        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertIn('not found', result.message)

    def test_database_error_before_transaction_is_a_failure(self):
        """
        Test: A locked table during the order-number check is reported,
        not raised.
        """
        with patch.object(Order.objects, 'filter', side_effect=OperationalError('database table is locked')):
            result = self.place([line(self.product_x, 1)])

        self.assertFalse(result.ok)
        self.assertEqual(result.kind, ErrorKind.TRANSACTION)
        self.product_x.refresh_from_db()
        self.assertEqual(self.product_x.stock_quantity, 100)

    def test_order_invalid_product(self):
        """
        Test: Order fails for non-existent product.
        """
        item = line(self.product_x, 1)
        item['product_id'] = 99999

        result = self.place([item])

        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertIn('not found', result.message.lower())
        self.assertEqual(Order.objects.count(), 0)


class OrderNotificationDispatchTestCase(TestCase):
    """The notification is queued once per committed order, after commit."""

    def setUp(self):
        self.customer = make_account()
        self.product = make_product('X', '10.00', 5)

    def test_dispatch_runs_on_commit(self):
        items = [line(self.product, 2)]
        with patch('orders.services.dispatch_order_notification') as dispatch:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                result = create_order('PO-240101-0001', self.customer.id, total_of(items), items)

        self.assertTrue(result.ok)
        self.assertEqual(len(callbacks), 1)
        dispatch.assert_called_once_with(result.data.id)

    def test_no_dispatch_for_failed_order(self):
        items = [line(self.product, 6)]
        with patch('orders.services.dispatch_order_notification') as dispatch:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                result = create_order('PO-240101-0002', self.customer.id, total_of(items), items)

        self.assertFalse(result.ok)
        self.assertEqual(len(callbacks), 0)
        dispatch.assert_not_called()

    def test_queue_failure_does_not_affect_order(self):
        """
        Test: A broker outage while queueing is logged, not raised.
        """
        items = [line(self.product, 1)]
        with patch('notifications.tasks.send_order_notification') as task:
            task.delay.side_effect = ConnectionError('broker down')
            with self.captureOnCommitCallbacks(execute=True):
                result = create_order('PO-240101-0003', self.customer.id, total_of(items), items)

        self.assertTrue(result.ok)
        self.assertTrue(Order.objects.filter(order_number='PO-240101-0003').exists())


class ConcurrentOrderTestCase(TransactionTestCase):
    """
    Test concurrent order handling.
    Uses TransactionTestCase for proper multi-threading support.
    """

    def setUp(self):
        """Set up test data for concurrent testing."""
        self.customer = make_account('race@example.com')
        # Only 10 units available
        self.product = make_product('RACE', '50.00', 10)

    def test_concurrent_orders_no_overselling(self):
        """
        Test: Concurrent orders don't oversell stock.

        Given: 10 units in stock
        When: Two concurrent orders of 8 units each
        Then: At most one succeeds and stock never goes negative
        """
        results = {}

        def place_order(key, number):
            try:
                items = [line(self.product, 8)]
                results[key] = create_order(number, self.customer.id, total_of(items), items)
            finally:
                connection.close()

        with patch('orders.services.dispatch_order_notification'):
            thread1 = threading.Thread(target=place_order, args=('order1', 'PO-240101-1001'))
            thread2 = threading.Thread(target=place_order, args=('order2', 'PO-240101-1002'))

            thread1.start()
            thread2.start()

            thread1.join()
            thread2.join()

        self.product.refresh_from_db()

        # Both calls returned a result; none raised
        self.assertEqual(set(results), {'order1', 'order2'})
        for result in results.values():
            self.assertIsInstance(result, (Success, Failure))

        succeeded = sum(1 for r in results.values() if r.ok)

        # At most one should succeed (prevents overselling)
        self.assertLessEqual(succeeded, 1)
        self.assertEqual(Order.objects.count(), succeeded)

        if succeeded == 1:
            self.assertEqual(self.product.stock_quantity, 2)
        else:
            self.assertEqual(self.product.stock_quantity, 10)


class OrderUpdateTestCase(TestCase):
    """Test cases for admin status updates."""

    def setUp(self):
        self.customer = make_account()
        self.order = Order.objects.create(
            order_number='PO-240101-0100',
            user=self.customer,
            total_amount=Decimal('100.00')
        )

    def test_status_progression(self):
        for status in ('confirmed', 'processing', 'shipped', 'delivered'):
            result = update_order(self.order.id, status=status)
            self.assertTrue(result.ok)
            self.assertEqual(result.data.status, status)

        self.order.refresh_from_db()
        self.assertTrue(self.order.is_terminal)

    def test_terminal_status_is_final(self):
        """
        Test: A cancelled order cannot move back to another status.
        """
        update_order(self.order.id, status='cancelled')

        result = update_order(self.order.id, status='pending')

        self.assertEqual(result.kind, ErrorKind.CONFLICT)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.CANCELLED)

    def test_notes_editable_on_terminal_order(self):
        update_order(self.order.id, status='delivered')

        result = update_order(self.order.id, notes='Signed by J. Doe')

        self.assertTrue(result.ok)
        self.assertEqual(result.data.notes, 'Signed by J. Doe')

    def test_update_missing_order(self):
        result = update_order(99999, status='confirmed')

        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)


class OrderApiTestCase(TestCase):
    """API tests: every outcome is an HTTP 200 envelope."""

    def setUp(self):
        self.client = APIClient()
        self.customer = make_account()
        self.other = make_account('other@example.com', business_name='Other Garage')
        self.product_x = make_product('X', '10.00', 100)
        self.product_y = make_product('Y', '5.00', 1)

    def payload(self, items, order_number='PO-240101-0007', user=None):
        return {
            'order_number': order_number,
            'user_id': (user or self.customer).id,
            'status': 'pending',
            'total_amount': str(total_of(items)),
            'notes': None,
            'items': [
                {**item, 'unit_price': str(item['unit_price']), 'total_price': str(item['total_price'])}
                for item in items
            ],
        }

    def test_create_order_returns_order_with_items(self):
        response = self.client.post(
            '/api/orders',
            self.payload([line(self.product_x, 2), line(self.product_y, 1)]),
            format='json'
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIsNone(body['error'])
        self.assertEqual(body['data']['order_number'], 'PO-240101-0007')
        self.assertEqual(body['data']['total_amount'], '25.00')
        self.assertEqual(len(body['data']['items']), 2)
        self.assertEqual(body['data']['user']['business_name'], 'Test Garage')

    def test_insufficient_stock_is_business_error(self):
        response = self.client.post(
            '/api/orders',
            self.payload([line(self.product_y, 3)]),
            format='json'
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIsNone(body['data'])
        self.assertIn('available: 1', body['error'])

    def test_malformed_request_is_enveloped(self):
        response = self.client.post('/api/orders', {'order_number': 'PO-240101-0007'}, format='json')

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIsNone(body['data'])
        self.assertIn('items', body['error'])

    def test_list_orders_filtered_by_user(self):
        self.client.post('/api/orders', self.payload([line(self.product_x, 1)]), format='json')
        self.client.post(
            '/api/orders',
            self.payload([line(self.product_x, 1)], order_number='PO-240101-0008', user=self.other),
            format='json'
        )

        response = self.client.get('/api/orders', {'user_id': self.customer.id})

        data = response.json()['data']
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]['user_id'], self.customer.id)
        self.assertEqual(data[0]['items'][0]['product_code'], 'X')
        self.assertEqual(data[0]['user']['email'], 'shop@example.com')

    def test_list_orders_rejects_non_numeric_user(self):
        response = self.client.get('/api/orders', {'user_id': 'abc'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'data': None,
            'error': 'user_id: A valid integer is required.'
        })

    def test_patch_status(self):
        order_id = self.client.post(
            '/api/orders', self.payload([line(self.product_x, 1)]), format='json'
        ).json()['data']['id']

        response = self.client.patch(f'/api/orders/{order_id}', {'status': 'shipped'}, format='json')

        self.assertEqual(response.json()['data']['status'], 'shipped')

    def test_patch_unknown_status_rejected(self):
        order_id = self.client.post(
            '/api/orders', self.payload([line(self.product_x, 1)]), format='json'
        ).json()['data']['id']

        response = self.client.patch(f'/api/orders/{order_id}', {'status': 'lost'}, format='json')

        body = response.json()
        self.assertIsNone(body['data'])
        self.assertIn('status', body['error'])

    def test_get_missing_order(self):
        response = self.client.get('/api/orders/99999')

        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.json()['error'])

    def test_stats(self):
        self.client.post('/api/orders', self.payload([line(self.product_x, 3)]), format='json')
        cancelled = self.client.post(
            '/api/orders',
            self.payload([line(self.product_x, 1)], order_number='PO-240101-0008'),
            format='json'
        ).json()['data']['id']
        update_order(cancelled, status='cancelled')

        stats = self.client.get('/api/orders/stats').json()['data']

        self.assertEqual(stats['total_orders'], 2)
        self.assertEqual(stats['pending_orders'], 1)
        self.assertEqual(stats['cancelled_orders'], 1)
        self.assertEqual(stats['total_revenue'], '30.00')
        self.assertEqual(stats['total_users'], 2)
        self.assertEqual(stats['total_products'], 2)
        self.assertEqual(stats['low_stock_products'], 1)

    def test_stats_revenue_formatted_without_orders(self):
        self.assertEqual(get_order_stats()['total_revenue'], '0.00')
