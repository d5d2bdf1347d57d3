"""
Delivery countdown for projects in production.

The status is derived on every read from the production start and the
delivery window; it is never stored.
"""
import math
from dataclasses import dataclass, asdict
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

from .models import Project

NOT_STARTED = 'not_started'
ON_TRACK = 'on_track'
DUE_SOON = 'due_soon'
OVERDUE = 'overdue'

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class DeadlineStatus:
    state: str
    days: Optional[int]
    label: str
    due_at: Optional[str] = None

    def as_dict(self):
        return asdict(self)


def deadline_status(status, delivery_days, production_started_at, now=None):
    """
    Days remaining (or overdue) until delivery for a project.

    The count is rounded up: the current day counts, so a project only
    reads as overdue once a full day has passed since the due instant.
    """
    if status != Project.STATUS_IN_PRODUCTION or production_started_at is None:
        return DeadlineStatus(state=NOT_STARTED, days=None, label='not started')

    window = delivery_days or settings.JOINERPRO_DEFAULT_DELIVERY_DAYS
    now = now or timezone.now()
    due_at = production_started_at + timedelta(days=window)
    remaining = math.ceil((due_at - now).total_seconds() / SECONDS_PER_DAY)

    if remaining < 0:
        return DeadlineStatus(
            state=OVERDUE,
            days=abs(remaining),
            label=f'{abs(remaining)} days overdue',
            due_at=due_at.isoformat(),
        )
    state = DUE_SOON if remaining <= settings.JOINERPRO_DUE_SOON_DAYS else ON_TRACK
    return DeadlineStatus(
        state=state,
        days=remaining,
        label=f'{remaining} days remaining',
        due_at=due_at.isoformat(),
    )


def project_deadline(project, now=None):
    return deadline_status(project.status, project.delivery_days, project.production_started_at, now=now)
