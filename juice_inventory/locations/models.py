from django.db import models


class Location(models.Model):
    """Places that hold stock: central stores, warehouses, outlets"""
    TYPE_CENTRAL_STORE = 'central_store'
    TYPE_WAREHOUSE = 'warehouse'
    TYPE_DISTRIBUTION_CENTER = 'distribution_center'
    TYPE_RETAIL_OUTLET = 'retail_outlet'
    TYPE_CHOICES = [
        (TYPE_CENTRAL_STORE, 'Central Store'),
        (TYPE_WAREHOUSE, 'Warehouse'),
        (TYPE_DISTRIBUTION_CENTER, 'Distribution Center'),
        (TYPE_RETAIL_OUTLET, 'Retail Outlet'),
    ]

    name = models.CharField(max_length=120, unique=True)
    type = models.CharField(max_length=40, choices=TYPE_CHOICES, default=TYPE_WAREHOUSE, db_index=True)
    address = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'locations'
        ordering = ['name']
