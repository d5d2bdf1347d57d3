import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .filters import PayableAccountFilter, ReceivableAccountFilter
from .serializers import (
    LedgerEntryRequestSerializer, ReceivableEntryRequestSerializer, SettleRequestSerializer,
    PayableAccountSerializer, ReceivableAccountSerializer,
)
from .services import PAYABLE, RECEIVABLE, create_ledger_entries, get_ledger_model, settle_account
from joinerpro.core.utils import create_audit_log

logger = logging.getLogger('joinerpro.finance')

# Per-kind wiring: (audit model name, filter, request serializer, output serializer)
LEDGER_VIEWS = {
    PAYABLE: ('PayableAccount', PayableAccountFilter, LedgerEntryRequestSerializer, PayableAccountSerializer),
    RECEIVABLE: ('ReceivableAccount', ReceivableAccountFilter, ReceivableEntryRequestSerializer, ReceivableAccountSerializer),
}


def _queryset(kind):
    queryset = get_ledger_model(kind).objects.all()
    if kind == RECEIVABLE:
        queryset = queryset.select_related('project')
    return queryset.order_by('due_date', 'id')


def _settle(request, kind, pk):
    model_name, _, _, output_serializer = LEDGER_VIEWS[kind]
    account = settle_account(kind, pk)
    create_audit_log(
        request=request,
        action='settle',
        model_name=model_name,
        object_id=account.id,
        object_name=account.description,
        changes={'status': account.status, 'settled_at': account.settled_at.isoformat()},
    )
    return Response(output_serializer(account).data)


def _list_create(request, kind):
    model_name, filter_class, request_serializer, output_serializer = LEDGER_VIEWS[kind]

    if request.method == 'GET':
        filterset = filter_class(request.query_params, queryset=_queryset(kind))
        serializer = output_serializer(filterset.qs, many=True)
        return Response(serializer.data)

    elif request.method == 'PUT':
        # Settle-only endpoint: body is just {"id": ...}
        serializer = SettleRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return _settle(request, kind, serializer.validated_data['id'])

    serializer = request_serializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    entry = serializer.to_entry()
    accounts = create_ledger_entries(kind, entry)
    logger.info(f"{len(accounts)} {kind} account(s) created by {request.user.username}")
    for account in accounts:
        create_audit_log(
            request=request,
            action='create' if entry.installments == 1 else 'installments_create',
            model_name=model_name,
            object_id=account.id,
            object_name=account.description,
            changes={'amount': str(account.amount), 'due_date': account.due_date.isoformat()},
        )
    return Response(output_serializer(accounts, many=True).data, status=status.HTTP_201_CREATED)


def _detail(request, kind, pk):
    model_name, _, _, output_serializer = LEDGER_VIEWS[kind]
    account = get_object_or_404(_queryset(kind), pk=pk)

    if request.method == 'GET':
        return Response(output_serializer(account).data)

    elif request.method == 'PATCH':
        serializer = output_serializer(account, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        account = serializer.save()
        create_audit_log(
            request=request,
            action='update',
            model_name=model_name,
            object_id=account.id,
            object_name=account.description,
            changes={key: str(value) for key, value in serializer.validated_data.items()},
        )
        return Response(output_serializer(account).data)

    else:  # DELETE
        account.delete()
        create_audit_log(request=request, action='delete', model_name=model_name, object_id=pk, object_name=account.description)
        return Response(status=status.HTTP_204_NO_CONTENT)


# PayableAccount views
@api_view(['GET', 'POST', 'PUT'])
@permission_classes([IsAuthenticated])
def payable_list_create(request):
    """List payables, create one or many (installments), or settle one by id"""
    return _list_create(request, PAYABLE)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def payable_detail(request, pk):
    """Retrieve, update or delete a payable"""
    return _detail(request, PAYABLE, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def payable_settle(request, pk):
    """Mark a payable as paid"""
    return _settle(request, PAYABLE, pk)


# ReceivableAccount views
@api_view(['GET', 'POST', 'PUT'])
@permission_classes([IsAuthenticated])
def receivable_list_create(request):
    """List receivables, create one or many (installments), or settle one by id"""
    return _list_create(request, RECEIVABLE)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def receivable_detail(request, pk):
    """Retrieve, update or delete a receivable"""
    return _detail(request, RECEIVABLE, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def receivable_settle(request, pk):
    """Mark a receivable as received"""
    return _settle(request, RECEIVABLE, pk)
