"""
Notification recipient API Views.

Implements:
- GET/POST /notification_recipients
- GET/PATCH/DELETE /notification_recipients/{id}
"""
from rest_framework import generics

from core.views import EnvelopeMixin
from .models import NotificationRecipient
from .serializers import NotificationRecipientSerializer


class RecipientListCreateView(EnvelopeMixin, generics.ListCreateAPIView):
    """
    GET: List all recipients, newest first
    POST: Add a recipient
    """
    queryset = NotificationRecipient.objects.order_by('-created_at')
    serializer_class = NotificationRecipientSerializer


class RecipientDetailView(EnvelopeMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET: Retrieve a recipient
    PATCH: Update email, name, role or active flag
    DELETE: Remove a recipient
    """
    queryset = NotificationRecipient.objects.all()
    serializer_class = NotificationRecipientSerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']
