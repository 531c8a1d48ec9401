from django.conf import settings
from django.db import models
from apps.items.models import Item


class BorrowRequest(models.Model):
    PENDING = 'pending'
    APPROVED = 'approved'
    DENIED = 'denied'
    RETURNED = 'returned'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (DENIED, 'Denied'),
        (RETURNED, 'Returned'),
    ]

    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='borrow_requests')
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='borrow_requests')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING, db_index=True)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    message = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"BorrowRequest #{self.id} - {self.buyer.email} for item #{self.item_id} [{self.status}]"

    def overlaps(self, start_date, end_date) -> bool:
        """Periods are inclusive at both ends."""
        return self.start_date <= end_date and start_date <= self.end_date

    @property
    def period_days(self) -> float:
        return (self.end_date - self.start_date).total_seconds() / 86400
