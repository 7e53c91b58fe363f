"""
Django Admin configuration for notification models.
"""
from django.contrib import admin
from .models import NotificationRecipient


@admin.register(NotificationRecipient)
class NotificationRecipientAdmin(admin.ModelAdmin):
    list_display = ['id', 'email', 'name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'name']
    ordering = ['-created_at']
