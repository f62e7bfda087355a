from django.conf import settings
from django.db import models
from juice_inventory.catalog.models import Product
from juice_inventory.locations.models import Location


class RestockRequest(models.Model):
    """Employee request to replenish a product at a location, reviewed by an admin"""
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='restock_requests')
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name='restock_requests')
    employee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='restock_requests')
    requested_quantity = models.PositiveIntegerField()
    confirmed_quantity = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True, null=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='reviewed_restock_requests'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Restock #{self.pk} {self.product.name} x{self.requested_quantity} ({self.status})"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    class Meta:
        db_table = 'restock_requests'
        ordering = ['-created_at', '-id']
