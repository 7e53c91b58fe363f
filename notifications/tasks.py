"""
Celery tasks for order notifications.

Tasks:
    - send_order_notification: Email a new-order summary to active recipients

Notification is best effort. Failures are logged and never retried, and
nothing here can affect the order that triggered it.
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def dispatch_order_notification(order_id: int) -> None:
    """
    Queue the notification task for a committed order.

    Registered with ``transaction.on_commit`` by the order service, so it
    runs once per committed order and never for a rolled-back one.
    """
    try:
        send_order_notification.delay(order_id)
        logger.info(f"Queued notification task for order #{order_id}")
    except Exception as e:
        # The order is already committed; a broker outage only loses the email
        logger.error(f"Failed to queue notification task for order #{order_id}: {e}")


def build_order_message(order) -> str:
    """Render the plain-text email body for an order."""
    customer = order.user
    lines = [
        f"  - {item.product_code} {item.product_name}: "
        f"{item.quantity} x {item.unit_price} = {item.total_price}"
        for item in order.items.all()
    ]

    body = [
        f"New order {order.order_number}",
        "",
        f"Customer: {customer.business_name or customer.email}",
        f"Email: {customer.email}",
    ]
    if customer.contact_person:
        body.append(f"Contact person: {customer.contact_person}")
    if customer.phone:
        body.append(f"Phone: {customer.phone}")

    body += [
        "",
        "Items:",
        *lines,
        "",
        f"Total: {order.total_amount}",
    ]
    if order.notes:
        body += ["", f"Notes: {order.notes}"]
    body += ["", f"Placed: {order.created_at:%Y-%m-%d %H:%M}"]

    return "\n".join(body)


@shared_task
def send_order_notification(order_id: int):
    """
    Email a summary of a newly placed order to every active recipient.

    Args:
        order_id: ID of the committed order

    Returns:
        Dict with the outcome ('success', 'skipped' or 'error')
    """
    from orders.models import Order
    from .models import NotificationRecipient

    try:
        order = Order.objects.select_related('user').prefetch_related('items').get(id=order_id)
    except Order.DoesNotExist:
        logger.error(f"Order #{order_id} not found for notification")
        return {'status': 'error', 'message': f'Order {order_id} not found'}

    recipients = list(
        NotificationRecipient.objects.filter(is_active=True)
        .order_by('email')
        .values_list('email', flat=True)
    )
    if not recipients:
        logger.warning(f"No active notification recipients, skipping order {order.order_number}")
        return {'status': 'skipped', 'message': 'No active recipients'}

    subject = f"{settings.ORDER_NOTIFICATION_SUBJECT_PREFIX}New order {order.order_number}"

    try:
        send_mail(
            subject,
            build_order_message(order),
            settings.DEFAULT_FROM_EMAIL,
            recipients,
            fail_silently=False
        )
    except Exception as e:
        logger.exception(f"Failed to send notification for order {order.order_number}: {e}")
        return {'status': 'error', 'message': str(e)}

    logger.info(f"Notification for order {order.order_number} sent to {len(recipients)} recipients")

    return {
        'status': 'success',
        'order_id': order.id,
        'recipients': recipients
    }
