import django_filters
from .models import InventoryRecord
from .utils import get_inventory_setting


class InventoryRecordFilter(django_filters.FilterSet):
    """Filter for InventoryRecord model using django-filter"""

    product = django_filters.NumberFilter(field_name='product_id')
    location = django_filters.NumberFilter(field_name='location_id')
    category = django_filters.CharFilter(field_name='product__category', lookup_expr='iexact')
    low_stock = django_filters.BooleanFilter(method='filter_low_stock')

    class Meta:
        model = InventoryRecord
        fields = ['product', 'location', 'category', 'low_stock']

    def filter_low_stock(self, queryset, name, value):
        threshold = get_inventory_setting('LOW_STOCK_THRESHOLD', 10)
        if value:
            return queryset.filter(quantity__lt=threshold)
        return queryset.filter(quantity__gte=threshold)
