"""
Installment planning for payable and receivable entries.

A total is split into ``count`` monthly installments. Each installment is
the total divided by the count, truncated to cents; the last installment
takes whatever the truncation left over, so the plan always adds up to the
exact total.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import List

from dateutil.relativedelta import relativedelta

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class InstallmentPlan:
    number: int
    count: int
    amount: Decimal
    due_date: date


def add_months(base: date, months: int) -> date:
    """Calendar-month offset; Jan 31 + 1 month lands on the last day of February."""
    return base + relativedelta(months=months)


def split_amount(total: Decimal, count: int) -> List[Decimal]:
    if count < 1:
        raise ValueError('Installment count must be at least 1.')
    total = Decimal(total).quantize(CENTS, rounding=ROUND_HALF_UP)
    share = (total / count).quantize(CENTS, rounding=ROUND_DOWN)
    amounts = [share] * (count - 1)
    amounts.append(total - share * (count - 1))
    return amounts


def plan_installments(total: Decimal, first_due: date, count: int) -> List[InstallmentPlan]:
    """
    Installment ``i`` (0-indexed) falls due ``i`` calendar months after
    ``first_due``.
    """
    amounts = split_amount(total, count)
    return [
        InstallmentPlan(
            number=index + 1,
            count=count,
            amount=amount,
            due_date=add_months(first_due, index),
        )
        for index, amount in enumerate(amounts)
    ]
