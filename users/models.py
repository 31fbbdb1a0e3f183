from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User Model inheriting from AbstractUser for flexibility.

    Suppliers and distributors are both plain users; what makes someone a
    supplier is owning a catalog that others replicate.
    """

    name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=30, blank=True)

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.username


class BusinessProfile(models.Model):
    """
    Public business identity of a user (shown to the other side of a quote).
    """
    user = models.OneToOneField(
        'users.User',
        on_delete=models.CASCADE,
        related_name='business_profile'
    )
    business_name = models.CharField(
        max_length=255,
        help_text="Trading name shown on catalogs and quotes"
    )
    phone = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.business_name
