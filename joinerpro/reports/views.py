import logging
from decimal import Decimal
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone

from .exports import SheetSpec, spreadsheet_response
from .summaries import dashboard, financial_summary
from joinerpro.clients.models import Client
from joinerpro.finance.filters import parse_month
from joinerpro.finance.models import PayableAccount, ReceivableAccount
from joinerpro.inventory.models import StockItem
from joinerpro.inventory.valuation import LOW, stock_status
from joinerpro.projects.models import Project

logger = logging.getLogger('joinerpro.reports')

STOCK_STATUS_LABELS = {LOW: 'Low stock', 'ok': 'OK'}


def _local_date(value):
    """Excel cannot hold timezone-aware datetimes"""
    return timezone.localtime(value).date() if value else None


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_summary_report(request):
    """Payable/receivable totals, optionally restricted to ?month=YYYY-MM"""
    month_param = request.query_params.get('month')
    year = month = None
    if month_param:
        year, month = parse_month(month_param)
    return Response(financial_summary(year, month))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_report(request):
    """Headline figures for the home screen"""
    return Response(dashboard())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def clients_export(request):
    """Client list as a spreadsheet"""
    clients = Client.objects.with_project_count().order_by('name')
    sheet = SheetSpec(
        title='Clients',
        columns=[
            ('Name', 30), ('Email', 30), ('Phone', 20), ('Address', 40),
            ('Projects', 12), ('Registered on', 15),
        ],
        rows=[
            (c.name, c.email, c.phone, c.address, c.project_count, _local_date(c.created_at))
            for c in clients
        ],
    )
    logger.info(f"Clients export ({len(sheet.rows)} rows) requested by {request.user.username}")
    return spreadsheet_response('clients_report.xlsx', [sheet])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_export(request):
    """Stock items with valuation and low-stock status as a spreadsheet"""
    items = StockItem.objects.with_category().order_by('name')
    sheet = SheetSpec(
        title='Stock',
        columns=[
            ('Name', 30), ('Category', 20), ('Description', 40), ('Unit', 10),
            ('On hand', 15), ('Reorder threshold', 18), ('Unit cost', 15),
            ('Stock value', 18), ('Status', 15),
        ],
        rows=[
            (
                item.name, item.category.name, item.description, item.unit,
                item.quantity_on_hand, item.reorder_threshold, item.unit_cost,
                item.get_stock_value(), STOCK_STATUS_LABELS[stock_status(item)],
            )
            for item in items
        ],
    )
    logger.info(f"Stock export ({len(sheet.rows)} rows) requested by {request.user.username}")
    return spreadsheet_response('stock_report.xlsx', [sheet])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def projects_export(request):
    """Projects with client and material cost as a spreadsheet"""
    projects = Project.objects.with_client().with_materials().order_by('-created_at')
    rows = []
    for project in projects:
        # Uses the prefetched lines instead of one query per project
        material_cost = sum((line.get_line_cost() for line in project.materials.all()), Decimal('0.00'))
        rows.append((
            project.name, project.client.name, project.total_value,
            project.get_status_display(), project.effective_delivery_days,
            _local_date(project.production_started_at), material_cost,
            project.description, _local_date(project.created_at),
        ))
    sheet = SheetSpec(
        title='Projects',
        columns=[
            ('Project', 30), ('Client', 30), ('Total value', 15), ('Status', 15),
            ('Delivery days', 14), ('Production start', 18), ('Material cost', 15),
            ('Description', 40), ('Created on', 15),
        ],
        rows=rows,
    )
    logger.info(f"Projects export ({len(rows)} rows) requested by {request.user.username}")
    return spreadsheet_response('projects_report.xlsx', [sheet])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def finance_export(request):
    """Payables and receivables, one sheet each"""
    payables = PayableAccount.objects.order_by('due_date', 'id')
    receivables = ReceivableAccount.objects.select_related('project').order_by('due_date', 'id')
    payable_sheet = SheetSpec(
        title='Payables',
        columns=[
            ('Description', 40), ('Amount', 15), ('Due date', 15), ('Paid on', 15),
            ('Payment method', 18), ('Status', 12),
        ],
        rows=[
            (
                p.description, p.amount, p.due_date, _local_date(p.settled_at),
                p.get_payment_method_display(), p.get_status_display(),
            )
            for p in payables
        ],
    )
    receivable_sheet = SheetSpec(
        title='Receivables',
        columns=[
            ('Description', 40), ('Project', 25), ('Amount', 15), ('Due date', 15),
            ('Received on', 15), ('Payment method', 18), ('Status', 12),
        ],
        rows=[
            (
                r.description, r.project.name if r.project else '', r.amount, r.due_date,
                _local_date(r.settled_at), r.get_payment_method_display(), r.get_status_display(),
            )
            for r in receivables
        ],
    )
    logger.info(f"Finance export requested by {request.user.username}")
    return spreadsheet_response('finance_report.xlsx', [payable_sheet, receivable_sheet])
