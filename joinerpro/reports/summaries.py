"""
Report figures built from fresh queries on every call.
"""
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, DecimalField, Sum
from django.utils import timezone

from joinerpro.finance.models import PayableAccount, ReceivableAccount
from joinerpro.inventory.models import StockItem
from joinerpro.inventory.valuation import stock_valuation
from joinerpro.projects.models import Project

ZERO = Decimal('0.00')


def _total(queryset):
    return queryset.aggregate(total=Sum('amount', output_field=DecimalField()))['total'] or ZERO


def _ledger_figures(queryset, model):
    counts = dict(queryset.order_by().values_list('status').annotate(count=Count('id')))
    return {
        'total': _total(queryset),
        'settled': _total(queryset.settled()),
        'open': _total(queryset.open()),
        'pending_count': counts.get(model.STATUS_PENDING, 0),
        'overdue_count': counts.get(model.STATUS_OVERDUE, 0),
        'settled_count': counts.get(model.SETTLED_STATUS, 0),
    }


def financial_summary(year=None, month=None):
    """
    Accrual and cash totals for payables and receivables.

    Accrual totals count every row; cash totals only settled rows. The real
    balance is what was received minus what was paid. With ``year`` and
    ``month`` the figures cover rows falling due in that month only.
    """
    payables = PayableAccount.objects.all()
    receivables = ReceivableAccount.objects.all()
    if year and month:
        payables = payables.for_month(year, month)
        receivables = receivables.for_month(year, month)

    payable = _ledger_figures(payables, PayableAccount)
    receivable = _ledger_figures(receivables, ReceivableAccount)
    return {
        'period': f'{year:04d}-{month:02d}' if year and month else None,
        'payables': payable,
        'receivables': receivable,
        'accrual_balance': receivable['total'] - payable['total'],
        'real_balance': receivable['settled'] - payable['settled'],
    }


def dashboard(today=None):
    today = today or timezone.localdate()
    horizon = today + timedelta(days=settings.JOINERPRO_DUE_SOON_DAYS)
    due_soon = PayableAccount.objects.open().due_between(today, horizon)
    return {
        'active_projects': Project.objects.in_production().count(),
        'low_stock_count': StockItem.objects.low().count(),
        'stock_valuation': stock_valuation(StockItem.objects.all()),
        'payables_due_soon': {
            'count': due_soon.count(),
            'total': _total(due_soon),
            'until': horizon.isoformat(),
        },
    }
