"""
Django Admin configuration for account models.
"""
from django.contrib import admin
from .models import Account


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ['id', 'email', 'business_name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['email', 'business_name', 'contact_person']
    ordering = ['-created_at']
    readonly_fields = ['password_hash', 'created_at', 'updated_at']
