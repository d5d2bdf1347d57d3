import logging
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from .filters import ProjectFilter
from .models import Project, ProjectMaterial
from .serializers import ProjectSerializer, ProjectDetailSerializer, ProjectMaterialSerializer
from joinerpro.core.exceptions import ConflictError
from joinerpro.core.utils import create_audit_log

logger = logging.getLogger('joinerpro.projects')


# Project views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_list_create(request):
    """List all projects (newest first) or create a new project"""
    if request.method == 'GET':
        queryset = Project.objects.with_client().order_by('-created_at', '-id')
        filterset = ProjectFilter(request.query_params, queryset=queryset)
        serializer = ProjectSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    serializer = ProjectSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    project = serializer.save()
    logger.info(f"Project {project.id} created for client {project.client_id} by {request.user.username}")
    create_audit_log(
        request=request,
        action='create',
        model_name='Project',
        object_id=project.id,
        object_name=project.name,
        changes={'client': project.client_id, 'total_value': str(project.total_value)},
    )
    return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def project_detail(request, pk):
    """Retrieve, update or delete a project"""
    if request.method == 'GET':
        project = get_object_or_404(Project.objects.with_client(), pk=pk)
        return Response(ProjectDetailSerializer(project).data)

    elif request.method == 'PATCH':
        with transaction.atomic():
            # Lock the row so two concurrent transitions cannot both stamp the start
            project = get_object_or_404(Project.objects.select_for_update(), pk=pk)
            previous_status = project.status
            serializer = ProjectSerializer(project, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            project = serializer.save()

        if project.status != previous_status:
            logger.info(f"Project {project.id} status {previous_status} -> {project.status}")
        if serializer.production_started:
            create_audit_log(
                request=request,
                action='production_start',
                model_name='Project',
                object_id=project.id,
                object_name=project.name,
                changes={'production_started_at': project.production_started_at.isoformat()},
            )
        return Response(ProjectDetailSerializer(project).data)

    else:  # DELETE
        project = get_object_or_404(Project, pk=pk)
        try:
            project.delete()
        except ProtectedError:
            raise ConflictError('This project cannot be deleted because it has materials linked to it.')
        create_audit_log(request=request, action='delete', model_name='Project', object_id=pk, object_name=project.name)
        return Response(status=status.HTTP_204_NO_CONTENT)


# Bill of materials views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_material_list_create(request, pk):
    """List a project's material lines or add a new one"""
    project = get_object_or_404(Project, pk=pk)

    if request.method == 'GET':
        lines = project.materials.select_related('stock_item')
        data = ProjectMaterialSerializer(lines, many=True).data
        return Response({
            'project': project.id,
            'materials': data,
            'material_cost': sum((line.get_line_cost() for line in lines), Decimal('0.00')),
        })

    serializer = ProjectMaterialSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    line = serializer.save(project=project)
    create_audit_log(
        request=request,
        action='material_add',
        model_name='ProjectMaterial',
        object_id=line.id,
        object_name=f"{project.name}: {line.stock_item.name}",
        changes={'quantity_used': str(line.quantity_used)},
    )
    return Response(ProjectMaterialSerializer(line).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def project_material_detail(request, pk, material_id):
    """Remove one material line from a project"""
    line = get_object_or_404(ProjectMaterial.objects.select_related('stock_item', 'project'), pk=material_id, project_id=pk)
    line.delete()
    create_audit_log(
        request=request,
        action='material_remove',
        model_name='ProjectMaterial',
        object_id=material_id,
        object_name=f"{line.project.name}: {line.stock_item.name}",
    )
    return Response(status=status.HTTP_204_NO_CONTENT)
