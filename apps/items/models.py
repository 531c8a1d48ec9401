from django.conf import settings
from django.db import models

CATEGORIES = [
    'Tools',
    'Electronics',
    'Books',
    'Sports',
    'Outdoor',
    'Kitchen',
    'Furniture',
    'Clothing',
    'Other',
]


class Item(models.Model):
    AVAILABLE = 'available'
    BORROWED = 'borrowed'
    STATUS_CHOICES = [
        (AVAILABLE, 'Available'),
        (BORROWED, 'Borrowed'),
    ]

    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='items')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    category = models.CharField(max_length=100, db_index=True)
    image_url = models.CharField(max_length=500, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=AVAILABLE, db_index=True)
    location = models.CharField(max_length=255, blank=True, default='')
    duration = models.PositiveIntegerField(default=7, help_text="Longest borrow period in days")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Item #{self.id} - {self.title} ({self.status})"

    @property
    def is_available(self):
        return self.status == self.AVAILABLE
