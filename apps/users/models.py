from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    SELLER = 'seller'
    BUYER = 'buyer'
    ROLE_CHOICES = [
        (SELLER, 'Seller'),
        (BUYER, 'Buyer'),
    ]

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def is_seller(self):
        return self.role == self.SELLER

    @property
    def is_buyer(self):
        return self.role == self.BUYER
