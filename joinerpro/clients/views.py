import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import IntegrityError, transaction
from django.db.models import Q, ProtectedError
from django.shortcuts import get_object_or_404
from .models import Client
from .serializers import ClientSerializer, ClientDetailSerializer
from joinerpro.core.exceptions import ConflictError
from joinerpro.core.utils import create_audit_log

logger = logging.getLogger('joinerpro.clients')

DUPLICATE_EMAIL_MESSAGE = 'This e-mail is already registered for another client.'


def _ensure_unique_email(email, exclude_pk=None):
    queryset = Client.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)


def _save_client(serializer):
    try:
        with transaction.atomic():
            return serializer.save()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same e-mail
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_list_create(request):
    """List all clients or create a new client"""
    if request.method == 'GET':
        queryset = Client.objects.with_project_count().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(email__icontains=search) |
                Q(phone__icontains=search)
            )
        serializer = ClientSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = ClientSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    _ensure_unique_email(serializer.validated_data['email'])
    client = _save_client(serializer)
    logger.info(f"Client {client.id} created by {request.user.username}")
    create_audit_log(
        request=request,
        action='create',
        model_name='Client',
        object_id=client.id,
        object_name=client.name,
        changes={'email': client.email},
    )
    return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def client_detail(request, pk):
    """Retrieve, update or delete a client"""
    client = get_object_or_404(Client, pk=pk)

    if request.method == 'GET':
        serializer = ClientDetailSerializer(client)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = ClientSerializer(client, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if 'email' in serializer.validated_data:
            _ensure_unique_email(serializer.validated_data['email'], exclude_pk=client.pk)
        client = _save_client(serializer)
        return Response(ClientSerializer(client).data)
    else:  # DELETE
        try:
            client.delete()
        except ProtectedError:
            raise ConflictError('This client cannot be deleted because it has projects. Remove the projects first.')
        create_audit_log(
            request=request,
            action='delete',
            model_name='Client',
            object_id=pk,
            object_name=client.name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
