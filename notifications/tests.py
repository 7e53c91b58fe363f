"""
Tests for notification recipients and the new-order email task.
"""
from decimal import Decimal
from django.core import mail
from django.test import TestCase, override_settings
from rest_framework.test import APIClient
from unittest.mock import patch

from accounts.models import Account
from notifications.models import NotificationRecipient
from notifications.tasks import build_order_message, send_order_notification
from orders.models import Order, OrderItem


@override_settings(
    EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend',
    ORDER_NOTIFICATION_SUBJECT_PREFIX=''
)
class SendOrderNotificationTestCase(TestCase):

    def setUp(self):
        customer = Account(
            email='shop@example.com',
            business_name='Riverside Garage',
            contact_person='Dana',
            phone='+1 555 0100'
        )
        customer.set_password('secret123')
        customer.save()

        self.order = Order.objects.create(
            order_number='PO-240101-0042',
            user=customer,
            total_amount=Decimal('230.00'),
            notes='Deliver before noon'
        )
        OrderItem.objects.create(
            order=self.order,
            product_code='MIC-2055516',
            product_name='Primacy 4',
            quantity=2,
            unit_price=Decimal('100.00'),
            total_price=Decimal('200.00')
        )
        OrderItem.objects.create(
            order=self.order,
            product_code='PIR-1956515',
            product_name='Cinturato P7',
            quantity=1,
            unit_price=Decimal('30.00'),
            total_price=Decimal('30.00')
        )

        NotificationRecipient.objects.create(email='warehouse@example.com', role='warehouse')
        NotificationRecipient.objects.create(email='finance@example.com', role='finance')
        NotificationRecipient.objects.create(email='retired@example.com', is_active=False)

    def test_sends_to_active_recipients(self):
        result = send_order_notification(self.order.id)

        self.assertEqual(result['status'], 'success')
        self.assertEqual(result['recipients'], ['finance@example.com', 'warehouse@example.com'])
        self.assertEqual(len(mail.outbox), 1)

        message = mail.outbox[0]
        self.assertEqual(message.subject, 'New order PO-240101-0042')
        self.assertNotIn('retired@example.com', message.to)

    def test_message_body(self):
        body = build_order_message(self.order)

        self.assertIn('Riverside Garage', body)
        self.assertIn('Dana', body)
        self.assertIn('MIC-2055516 Primacy 4: 2 x 100.00 = 200.00', body)
        self.assertIn('Total: 230.00', body)
        self.assertIn('Notes: Deliver before noon', body)

    def test_skipped_without_recipients(self):
        NotificationRecipient.objects.update(is_active=False)

        result = send_order_notification(self.order.id)

        self.assertEqual(result['status'], 'skipped')
        self.assertEqual(len(mail.outbox), 0)

    def test_unknown_order(self):
        result = send_order_notification(999999)

        self.assertEqual(result['status'], 'error')
        self.assertEqual(len(mail.outbox), 0)

    def test_send_failure_is_reported_not_raised(self):
        with patch('notifications.tasks.send_mail', side_effect=OSError('SMTP down')):
            result = send_order_notification(self.order.id)

        self.assertEqual(result['status'], 'error')
        self.assertIn('SMTP down', result['message'])
        # The order itself is untouched
        self.assertTrue(Order.objects.filter(id=self.order.id).exists())


class RecipientApiTestCase(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_create_and_list(self):
        created = self.client.post(
            '/api/notification_recipients',
            {'email': 'ops@example.com', 'name': 'Ops', 'role': 'manager'},
            format='json'
        ).json()

        self.assertIsNone(created['error'])
        self.assertTrue(created['data']['is_active'])

        listing = self.client.get('/api/notification_recipients').json()
        self.assertEqual([r['email'] for r in listing['data']], ['ops@example.com'])

    def test_unknown_role_rejected(self):
        body = self.client.post(
            '/api/notification_recipients',
            {'email': 'ops@example.com', 'role': 'janitor'},
            format='json'
        ).json()

        self.assertIsNone(body['data'])
        self.assertIn('role', body['error'])

    def test_deactivate_and_delete(self):
        recipient = NotificationRecipient.objects.create(email='ops@example.com')

        patched = self.client.patch(
            f'/api/notification_recipients/{recipient.id}', {'is_active': False}, format='json'
        ).json()
        self.assertFalse(patched['data']['is_active'])

        deleted = self.client.delete(f'/api/notification_recipients/{recipient.id}').json()
        self.assertEqual(deleted, {'data': {'success': True}, 'error': None})
        self.assertFalse(NotificationRecipient.objects.exists())
