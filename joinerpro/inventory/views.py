import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from .filters import StockItemFilter
from .models import StockCategory, StockItem
from .serializers import StockCategorySerializer, StockItemSerializer
from .valuation import summarize_stock
from joinerpro.core.exceptions import ConflictError
from joinerpro.core.utils import create_audit_log

logger = logging.getLogger('joinerpro.inventory')

DUPLICATE_CATEGORY_MESSAGE = 'This category already exists.'


# StockItem views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stock_item_list_create(request):
    """List all stock items or create a new one"""
    if request.method == 'GET':
        queryset = StockItem.objects.with_category().order_by('name')
        filterset = StockItemFilter(request.query_params, queryset=queryset)
        serializer = StockItemSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    serializer = StockItemSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    item = serializer.save()
    logger.info(f"Stock item {item.id} ({item.name}) created by {request.user.username}")
    create_audit_log(
        request=request,
        action='create',
        model_name='StockItem',
        object_id=item.id,
        object_name=item.name,
        changes={
            'quantity_on_hand': str(item.quantity_on_hand),
            'unit_cost': str(item.unit_cost),
        },
    )
    return Response(StockItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def stock_item_detail(request, pk):
    """Retrieve, update or delete a stock item"""
    item = get_object_or_404(StockItem.objects.with_category(), pk=pk)

    if request.method == 'GET':
        serializer = StockItemSerializer(item)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        before = {'quantity_on_hand': str(item.quantity_on_hand), 'unit_cost': str(item.unit_cost)}
        serializer = StockItemSerializer(item, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        after = {'quantity_on_hand': str(item.quantity_on_hand), 'unit_cost': str(item.unit_cost)}
        if before != after:
            create_audit_log(
                request=request,
                action='update',
                model_name='StockItem',
                object_id=item.id,
                object_name=item.name,
                changes={'before': before, 'after': after},
            )
        return Response(serializer.data)
    else:  # DELETE
        try:
            item.delete()
        except ProtectedError:
            raise ConflictError('This stock item cannot be deleted because projects use it.')
        create_audit_log(request=request, action='delete', model_name='StockItem', object_id=pk, object_name=item.name)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_low(request):
    """Items at or below their reorder threshold"""
    items = StockItem.objects.with_category().low().order_by('name')
    serializer = StockItemSerializer(items, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_summary(request):
    """Stock totals, valuation and per-category grouping"""
    items = StockItem.objects.with_category().all()
    return Response(summarize_stock(items))


def _save_category(serializer, exclude_pk=None):
    """Save a category, reporting a case-insensitive name clash as 409"""
    if 'name' in serializer.validated_data:
        duplicates = StockCategory.objects.filter(name__iexact=serializer.validated_data['name'])
        if exclude_pk is not None:
            duplicates = duplicates.exclude(pk=exclude_pk)
        if duplicates.exists():
            raise ConflictError(DUPLICATE_CATEGORY_MESSAGE)
    try:
        with transaction.atomic():
            return serializer.save()
    except IntegrityError:
        raise ConflictError(DUPLICATE_CATEGORY_MESSAGE)


# StockCategory views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stock_category_list_create(request):
    """List all stock categories or create a new one"""
    if request.method == 'GET':
        categories = StockCategory.objects.order_by('name')
        serializer = StockCategorySerializer(categories, many=True)
        return Response(serializer.data)

    serializer = StockCategorySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    category = _save_category(serializer)
    return Response(StockCategorySerializer(category).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def stock_category_detail(request, pk):
    """Retrieve, rename or delete a stock category"""
    category = get_object_or_404(StockCategory, pk=pk)

    if request.method == 'GET':
        return Response(StockCategorySerializer(category).data)
    elif request.method == 'PATCH':
        previous_name = category.name
        serializer = StockCategorySerializer(category, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = _save_category(serializer, exclude_pk=category.pk)
        if category.name != previous_name:
            create_audit_log(
                request=request,
                action='update',
                model_name='StockCategory',
                object_id=category.id,
                object_name=category.name,
                changes={'name': {'before': previous_name, 'after': category.name}},
            )
        return Response(StockCategorySerializer(category).data)

    try:
        category.delete()
    except ProtectedError:
        raise ConflictError(
            'This category cannot be deleted because stock items are registered in it. '
            'Remove the items first.'
        )
    create_audit_log(request=request, action='delete', model_name='StockCategory', object_id=pk, object_name=category.name)
    return Response(status=status.HTTP_204_NO_CONTENT)
