import django_filters
from .models import Sale


class SaleFilter(django_filters.FilterSet):
    """Filter for Sale model using django-filter"""

    sale_type = django_filters.ChoiceFilter(choices=Sale.SALE_TYPE_CHOICES)
    location = django_filters.NumberFilter(field_name='location_id')
    product = django_filters.NumberFilter(field_name='product_id')
    category = django_filters.CharFilter(field_name='product__category', lookup_expr='iexact')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Sale
        fields = ['sale_type', 'location', 'product', 'category', 'date_from', 'date_to']
