import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from juice_inventory.core.models import Notification
from juice_inventory.core.permissions import IsAdminRole, is_admin_user
from juice_inventory.core.utils import create_audit_log
from .models import RestockRequest
from .serializers import RestockRequestSerializer, resolve_confirmed_quantity

logger = logging.getLogger('juice_inventory.restock')


def _request_queryset():
    return RestockRequest.objects.select_related(
        'product', 'location', 'employee', 'employee__profile', 'reviewed_by'
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def restock_request_list_create(request):
    """List restock requests (admins see all, employees their own) or submit a new one"""
    if request.method == 'GET':
        queryset = _request_queryset()
        if not is_admin_user(request.user):
            queryset = queryset.filter(employee=request.user)

        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        queryset = queryset.order_by('-created_at', '-id')
        serializer = RestockRequestSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = RestockRequestSerializer(data=request.data)
    if serializer.is_valid():
        restock_request = serializer.save(employee=request.user, status=RestockRequest.STATUS_PENDING)
        create_audit_log(
            request=request,
            action='restock_request',
            model_name='RestockRequest',
            object_id=restock_request.id,
            object_name=restock_request.product.name,
            changes={
                'location': restock_request.location.name,
                'requested_quantity': restock_request.requested_quantity,
            },
        )
        logger.info(f"Restock request {restock_request.id} submitted by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Restock request validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def restock_request_detail(request, pk):
    """Retrieve a restock request (owner or admin)"""
    queryset = _request_queryset()
    if not is_admin_user(request.user):
        queryset = queryset.filter(employee=request.user)
    restock_request = get_object_or_404(queryset, pk=pk)
    return Response(RestockRequestSerializer(restock_request).data)


def _notify_employee(restock_request, message):
    Notification.objects.create(
        user=restock_request.employee,
        title='Restock Request Update',
        message=message,
        type='restock_update',
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def restock_request_approve(request, pk):
    """Approve a pending restock request, confirming a quantity"""
    restock_request = get_object_or_404(_request_queryset(), pk=pk)
    if not restock_request.is_pending:
        return Response(
            {'error': f'Only pending requests can be approved (current status: {restock_request.status})'},
            status=status.HTTP_400_BAD_REQUEST
        )

    confirmed_quantity = resolve_confirmed_quantity(
        request.data.get('confirmed_quantity', None), restock_request.requested_quantity
    )

    try:
        with transaction.atomic():
            restock_request.status = RestockRequest.STATUS_APPROVED
            restock_request.confirmed_quantity = confirmed_quantity
            restock_request.reviewed_by = request.user
            restock_request.reviewed_at = timezone.now()
            restock_request.save()
            _notify_employee(
                restock_request,
                f"Your restock request for {restock_request.product.name} at {restock_request.location.name} "
                f"was approved ({confirmed_quantity} units)",
            )
    except Exception as e:
        logger.error(f"Error approving restock request {pk}: {str(e)}", exc_info=True)
        return Response({'error': f'Failed to approve restock request: {str(e)}'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='restock_approve',
        model_name='RestockRequest',
        object_id=restock_request.id,
        object_name=restock_request.product.name,
        changes={
            'requested_quantity': restock_request.requested_quantity,
            'confirmed_quantity': confirmed_quantity,
        },
    )
    logger.info(f"Restock request {pk} approved by {request.user.username} ({confirmed_quantity} units)")
    return Response(RestockRequestSerializer(restock_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def restock_request_reject(request, pk):
    """Reject a pending restock request"""
    restock_request = get_object_or_404(_request_queryset(), pk=pk)
    if not restock_request.is_pending:
        return Response(
            {'error': f'Only pending requests can be rejected (current status: {restock_request.status})'},
            status=status.HTTP_400_BAD_REQUEST
        )

    with transaction.atomic():
        restock_request.status = RestockRequest.STATUS_REJECTED
        restock_request.reviewed_by = request.user
        restock_request.reviewed_at = timezone.now()
        restock_request.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'updated_at'])
        _notify_employee(
            restock_request,
            f"Your restock request for {restock_request.product.name} at {restock_request.location.name} was rejected",
        )

    create_audit_log(
        request=request,
        action='restock_reject',
        model_name='RestockRequest',
        object_id=restock_request.id,
        object_name=restock_request.product.name,
        changes={'requested_quantity': restock_request.requested_quantity},
    )
    logger.info(f"Restock request {pk} rejected by {request.user.username}")
    return Response(RestockRequestSerializer(restock_request).data)
