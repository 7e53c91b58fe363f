"""
Notification Models - people emailed when a new order is placed.
"""
from django.db import models


class NotificationRecipient(models.Model):
    """
    Email recipient for new-order notifications.

    Only active recipients are emailed. The role is informational and lets
    admins tell warehouse, finance and management contacts apart.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        WAREHOUSE = 'warehouse', 'Warehouse'
        FINANCE = 'finance', 'Finance'
        MANAGER = 'manager', 'Manager'

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=200, blank=True, default='')
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.ADMIN
    )
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Notification Recipient'
        verbose_name_plural = 'Notification Recipients'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} <{self.email}>" if self.name else self.email
