import logging
from datetime import timedelta
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, F, DecimalField, ExpressionWrapper
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from django.utils import timezone
from juice_inventory.core.models import Notification
from juice_inventory.core.permissions import is_admin_user
from juice_inventory.core.serializers import NotificationSerializer
from juice_inventory.core.utils import create_audit_log
from .filters import InventoryRecordFilter
from .models import InventoryRecord
from .serializers import InventoryRecordSerializer, ExpiringItemSerializer
from .utils import (
    bucket_expiring_records, build_expiration_message, days_until_expiration,
    get_inventory_setting, ATTENTION_DAYS,
)

logger = logging.getLogger('juice_inventory.inventory')


def _record_queryset():
    return InventoryRecord.objects.select_related('product', 'location')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_list_create(request):
    """List inventory records, lowest quantity first, or create one (create requires admin)"""
    if request.method == 'GET':
        filterset = InventoryRecordFilter(request.query_params, queryset=_record_queryset())
        queryset = filterset.qs.order_by('quantity', 'id')
        serializer = InventoryRecordSerializer(queryset, many=True)
        return Response(serializer.data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.username} attempted to create inventory without admin privileges")
        return Response({'error': 'Only administrators can modify inventory'}, status=status.HTTP_403_FORBIDDEN)

    serializer = InventoryRecordSerializer(data=request.data)
    if serializer.is_valid():
        record = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='InventoryRecord',
            object_id=record.id,
            object_name=f"{record.product.name} @ {record.location.name}",
            changes={'quantity': record.quantity, 'expiration_date': str(record.expiration_date)},
        )
        logger.info(f"Inventory record {record.id} created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Inventory creation validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, pk):
    """Retrieve, update or delete an inventory record (update/delete requires admin)"""
    record = get_object_or_404(_record_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(InventoryRecordSerializer(record).data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.username} attempted to modify inventory {pk} without admin privileges")
        return Response({'error': 'Only administrators can modify inventory'}, status=status.HTTP_403_FORBIDDEN)

    object_name = f"{record.product.name} @ {record.location.name}"

    if request.method in ('PUT', 'PATCH'):
        old_quantity = record.quantity
        serializer = InventoryRecordSerializer(record, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='InventoryRecord',
                object_id=record.id,
                object_name=object_name,
                changes={'quantity': {'old': old_quantity, 'new': record.quantity}},
            )
            return Response(serializer.data)
        logger.warning(f"Inventory update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    # DELETE
    record.delete()
    create_audit_log(
        request=request,
        action='delete',
        model_name='InventoryRecord',
        object_id=pk,
        object_name=object_name,
    )
    logger.info(f"Inventory record {pk} deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_overview(request):
    """Stats cards and chart data for the inventory overview page"""
    threshold = get_inventory_setting('LOW_STOCK_THRESHOLD', 10)
    window = get_inventory_setting('EXPIRATION_WINDOW_DAYS', ATTENTION_DAYS)
    preview_limit = get_inventory_setting('LOW_STOCK_PREVIEW_LIMIT', 5)
    today = timezone.localdate()

    records = _record_queryset()
    low_stock = records.filter(quantity__lt=threshold).order_by('quantity', 'id')

    value_expression = ExpressionWrapper(
        F('quantity') * F('product__unit_price'),
        output_field=DecimalField(max_digits=18, decimal_places=2),
    )
    total_value = records.aggregate(
        total=Coalesce(Sum(value_expression), Decimal('0'), output_field=DecimalField(max_digits=18, decimal_places=2))
    )['total']

    by_location = (
        records.values('location__name')
        .annotate(quantity=Sum('quantity'))
        .order_by('location__name')
    )
    by_category = (
        records.values('product__category')
        .annotate(value=Sum('quantity'))
        .order_by('product__category')
    )

    return Response({
        'total_products': records.count(),
        'low_stock_items': low_stock.count(),
        'expiring_soon': records.filter(expiration_date__lte=today + timedelta(days=window)).count(),
        'total_value': f"{total_value:.2f}",
        'active_locations': records.order_by().values('location_id').distinct().count(),
        'by_location': [
            {'location': row['location__name'], 'quantity': row['quantity']} for row in by_location
        ],
        'by_category': [
            {'category': row['product__category'], 'value': row['value']} for row in by_category
        ],
        'low_stock': InventoryRecordSerializer(low_stock[:preview_limit], many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def expiring_items(request):
    """Inventory records expiring within the alert window, grouped by urgency"""
    window = get_inventory_setting('EXPIRATION_WINDOW_DAYS', ATTENTION_DAYS)
    days_param = request.query_params.get('days', None)
    if days_param is not None:
        try:
            window = int(days_param)
        except ValueError:
            return Response({'error': 'days must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
        if window < 0:
            return Response({'error': 'days must not be negative'}, status=status.HTTP_400_BAD_REQUEST)

    today = timezone.localdate()
    candidates = _record_queryset().filter(expiration_date__lte=today + timedelta(days=window))
    items, counts = bucket_expiring_records(candidates, today=today, window_days=window)

    context = {
        'days': {record.pk: days for record, days, _ in items},
        'urgency': {record.pk: urgency for record, _, urgency in items},
    }
    serializer = ExpiringItemSerializer([record for record, _, _ in items], many=True, context=context)
    return Response({
        'items': serializer.data,
        'counts': counts,
        'total': len(items),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send_expiration_notification(request, pk):
    """Insert an expiration alert notification for the current user"""
    record = get_object_or_404(_record_queryset(), pk=pk)
    days = days_until_expiration(record.expiration_date)

    notification = Notification.objects.create(
        user=request.user,
        title='Expiration Alert',
        message=build_expiration_message(record, days),
        type='expiration_warning',
        read=False,
    )
    create_audit_log(
        request=request,
        action='expiration_notify',
        model_name='InventoryRecord',
        object_id=record.id,
        object_name=f"{record.product.name} @ {record.location.name}",
        changes={'notification_id': notification.id, 'days_until_expiration': days},
    )
    logger.info(f"Expiration notification {notification.id} sent for inventory {record.id} by {request.user.username}")
    return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)
