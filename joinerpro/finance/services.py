"""
Ledger operations shared by the payable and receivable endpoints.

The functions take plain values (``LedgerEntryRequest``, primary keys) so
they can be driven from views, management commands or tests alike.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from .installments import plan_installments
from .models import PAYMENT_METHOD_CHOICES, PayableAccount, ReceivableAccount
from joinerpro.core.exceptions import AlreadySettledError
from joinerpro.projects.models import Project

logger = logging.getLogger('joinerpro.finance')

PAYABLE = 'payable'
RECEIVABLE = 'receivable'

LEDGER_KINDS = {
    PAYABLE: PayableAccount,
    RECEIVABLE: ReceivableAccount,
}

PAYMENT_METHOD_LABELS = dict(PAYMENT_METHOD_CHOICES)


@dataclass(frozen=True)
class LedgerEntryRequest:
    description: str
    amount: Decimal
    due_date: date
    installments: int = 1
    payment_method: Optional[str] = None
    project: Optional[Project] = None


def get_ledger_model(kind):
    try:
        return LEDGER_KINDS[kind]
    except KeyError:
        raise ValueError(f'Unknown ledger kind: {kind!r}')


def single_payment_description(description, payment_method):
    label = PAYMENT_METHOD_LABELS.get(payment_method, payment_method)
    return f"{description} (Single payment - {label})"


def installment_description(description, number, count):
    return f"{description} ({number}/{count})"


def create_ledger_entries(kind, entry, now=None):
    """
    Expand a ledger request into rows.

    One installment is a cash transaction: a single row, already settled.
    More than one creates that many pending rows, one month apart. The rows
    are written in a single transaction, so either all of them exist or
    none does.
    """
    model = get_ledger_model(kind)
    payment_method = entry.payment_method or settings.JOINERPRO_DEFAULT_PAYMENT_METHOD
    extra = {}
    if kind == RECEIVABLE and entry.project is not None:
        extra['project'] = entry.project

    if entry.installments == 1:
        account = model.objects.create(
            description=single_payment_description(entry.description, payment_method),
            amount=entry.amount,
            due_date=entry.due_date,
            status=model.SETTLED_STATUS,
            settled_at=now or timezone.now(),
            payment_method=payment_method,
            installment_number=1,
            installment_count=1,
            **extra,
        )
        logger.info(f"{kind} account {account.id} created as single payment of {account.amount}")
        return [account]

    plan = plan_installments(entry.amount, entry.due_date, entry.installments)
    with transaction.atomic():
        accounts = [
            model.objects.create(
                description=installment_description(entry.description, row.number, row.count),
                amount=row.amount,
                due_date=row.due_date,
                status=model.STATUS_PENDING,
                settled_at=None,
                payment_method=payment_method,
                installment_number=row.number,
                installment_count=row.count,
                **extra,
            )
            for row in plan
        ]
    logger.info(f"{kind}: {len(accounts)} installments created totalling {entry.amount}")
    return accounts


def settle_account(kind, pk, now=None):
    """
    Mark a pending or overdue row as paid/received.

    Raises AlreadySettledError when the row is already settled; nothing is
    written in that case.
    """
    model = get_ledger_model(kind)
    with transaction.atomic():
        account = get_object_or_404(model.objects.select_for_update(), pk=pk)
        if account.is_settled:
            raise AlreadySettledError()
        account.status = model.SETTLED_STATUS
        account.settled_at = now or timezone.now()
        account.save(update_fields=['status', 'settled_at', 'updated_at'])
    logger.info(f"{kind} account {account.id} settled")
    return account


def mark_overdue(kind, today=None):
    """Flip pending rows whose due date has passed to overdue. Returns the count."""
    model = get_ledger_model(kind)
    today = today or timezone.localdate()
    updated = model.objects.overdue_candidates(today).update(
        status=model.STATUS_OVERDUE,
        updated_at=timezone.now(),
    )
    if updated:
        logger.info(f"{kind}: {updated} accounts marked overdue (due before {today})")
    return updated
