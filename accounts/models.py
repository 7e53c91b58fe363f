"""
Account Models - B2B customers and back-office administrators.

Accounts are separate from Django's auth users: the storefront logs in by
email against this table, while the Django admin site keeps using
``django.contrib.auth``.
"""
from django.contrib.auth.hashers import check_password, make_password
from django.db import models


class Account(models.Model):
    """
    A business customer or administrator of the ordering platform.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        USER = 'user', 'User'

    email = models.EmailField(
        unique=True,
        help_text="Login email, unique per account"
    )
    password_hash = models.CharField(max_length=128)
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.USER,
        db_index=True
    )
    business_name = models.CharField(max_length=200, blank=True, default='')
    business_number = models.CharField(max_length=50, blank=True, default='')
    phone = models.CharField(max_length=50, blank=True, default='')
    whatsapp = models.CharField(max_length=50, blank=True, default='')
    viber = models.CharField(max_length=50, blank=True, default='')
    contact_person = models.CharField(max_length=200, blank=True, default='')
    logo_url = models.URLField(max_length=500, blank=True, default='')
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Disabled accounts cannot log in or place orders"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Account'
        verbose_name_plural = 'Accounts'
        ordering = ['-created_at']

    def __str__(self):
        return self.business_name or self.email

    def set_password(self, raw_password: str) -> None:
        self.password_hash = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password_hash)

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN
