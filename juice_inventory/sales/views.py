import logging
from datetime import timedelta
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.db.models import Sum, Count
from django.db.models.functions import TruncDate
from django.shortcuts import get_object_or_404
from django.utils import timezone
from juice_inventory.core.utils import create_audit_log
from .filters import SaleFilter
from .models import Sale
from .serializers import SaleSerializer

logger = logging.getLogger('juice_inventory.sales')


def _sale_queryset():
    return Sale.objects.select_related('product', 'location', 'created_by')


def _chart_days():
    return getattr(settings, 'JUICE_INVENTORY', {}).get('SALES_CHART_DAYS', 7)


def _money(value):
    return f"{(value or Decimal('0')):.2f}"


def build_daily_series(rows, end_date, days):
    """
    Zero-filled per-day series of the last ``days`` calendar days ending at
    ``end_date``, oldest first. ``rows`` are dicts with day, revenue, quantity.
    """
    by_day = {row['day']: row for row in rows}
    series = []
    for offset in range(days - 1, -1, -1):
        day = end_date - timedelta(days=offset)
        row = by_day.get(day)
        series.append({
            'date': day.isoformat(),
            'revenue': _money(row['revenue'] if row else None),
            'quantity': (row['quantity'] or 0) if row else 0,
        })
    return series


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List sales, newest first, or record a new sale"""
    if request.method == 'GET':
        filterset = SaleFilter(request.query_params, queryset=_sale_queryset())
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = filterset.qs.order_by('-created_at', '-id')
        serializer = SaleSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = SaleSerializer(data=request.data)
    if serializer.is_valid():
        try:
            sale = serializer.save(created_by=request.user)
        except Exception as e:
            logger.error(f"Error recording sale: {str(e)}", exc_info=True)
            return Response({'error': f'Failed to record sale: {str(e)}'},
                            status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        create_audit_log(
            request=request,
            action='sale_record',
            model_name='Sale',
            object_id=sale.id,
            object_name=sale.product.name,
            changes={
                'location': sale.location.name,
                'quantity': sale.quantity,
                'unit_price': str(sale.unit_price),
                'total_amount': str(sale.total_amount),
                'sale_type': sale.sale_type,
            },
        )
        logger.info(f"Sale {sale.id} recorded by {request.user.username}: {sale.total_amount}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Sale validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve a sale"""
    sale = get_object_or_404(_sale_queryset(), pk=pk)
    return Response(SaleSerializer(sale).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_summary(request):
    """Totals, last-week daily chart and revenue by category"""
    filterset = SaleFilter(request.query_params, queryset=Sale.objects.all())
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    queryset = filterset.qs.order_by()

    totals = queryset.aggregate(
        total_revenue=Sum('total_amount'),
        total_quantity=Sum('quantity'),
        sales_count=Count('id'),
    )

    chart_days = _chart_days()
    today = timezone.localdate()
    start_date = today - timedelta(days=chart_days - 1)
    daily_rows = (
        queryset.filter(created_at__date__gte=start_date, created_at__date__lte=today)
        .annotate(day=TruncDate('created_at'))
        .values('day')
        .annotate(revenue=Sum('total_amount'), quantity=Sum('quantity'))
        .order_by('day')
    )

    by_category = (
        queryset.values('product__category')
        .annotate(revenue=Sum('total_amount'), quantity=Sum('quantity'))
        .order_by('-revenue', 'product__category')
    )

    return Response({
        'total_revenue': _money(totals['total_revenue']),
        'total_quantity': totals['total_quantity'] or 0,
        'sales_count': totals['sales_count'],
        'daily': build_daily_series(daily_rows, today, chart_days),
        'by_category': [
            {
                'category': row['product__category'],
                'revenue': _money(row['revenue']),
                'quantity': row['quantity'],
            }
            for row in by_category
        ],
    })
