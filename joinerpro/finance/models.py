from django.core.exceptions import ValidationError
from django.db import models
from decimal import Decimal
from joinerpro.projects.models import Project


PAYMENT_METHOD_CHOICES = [
    ('cash', 'Cash'),
    ('pix', 'Pix'),
    ('credit_card', 'Credit card'),
    ('debit_card', 'Debit card'),
    ('bank_slip', 'Bank slip'),
    ('cheque', 'Cheque'),
]


class LedgerAccountQuerySet(models.QuerySet):
    def for_month(self, year, month):
        """Entries falling due in the given calendar month"""
        return self.filter(due_date__year=year, due_date__month=month)

    def open(self):
        """Pending or overdue entries"""
        return self.filter(status__in=[self.model.STATUS_PENDING, self.model.STATUS_OVERDUE])

    def settled(self):
        return self.filter(status=self.model.SETTLED_STATUS)

    def overdue_candidates(self, today):
        return self.filter(status=self.model.STATUS_PENDING, due_date__lt=today)

    def due_between(self, start, end):
        return self.filter(due_date__gte=start, due_date__lte=end)


class LedgerAccount(models.Model):
    """Common shape of payable and receivable ledger rows"""
    STATUS_PENDING = 'pending'
    STATUS_OVERDUE = 'overdue'
    SETTLED_STATUS = None

    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    due_date = models.DateField()
    settled_at = models.DateTimeField(null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    installment_number = models.PositiveSmallIntegerField(default=1)
    installment_count = models.PositiveSmallIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LedgerAccountQuerySet.as_manager()

    def __str__(self):
        return f"{self.description} - {self.amount} ({self.status})"

    @property
    def is_settled(self):
        return self.status == self.SETTLED_STATUS

    def clean(self):
        """The settlement date is set exactly when the status says settled"""
        if self.is_settled and self.settled_at is None:
            raise ValidationError({'settled_at': 'A settled account needs a settlement date.'})
        if not self.is_settled and self.settled_at is not None:
            raise ValidationError({'settled_at': 'Only settled accounts carry a settlement date.'})
        if self.amount is not None and self.amount <= Decimal('0'):
            raise ValidationError({'amount': 'Amount must be greater than zero.'})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    class Meta:
        abstract = True
        ordering = ['due_date', 'id']


class PayableAccount(LedgerAccount):
    """Money the company owes (suppliers, bills)"""
    STATUS_PAID = 'paid'
    SETTLED_STATUS = STATUS_PAID

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('overdue', 'Overdue'),
    ]

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    class Meta(LedgerAccount.Meta):
        db_table = 'payable_accounts'
        indexes = [
            models.Index(fields=['status', 'due_date'], name='idx_payable_status_due'),
        ]


class ReceivableAccount(LedgerAccount):
    """Money owed to the company, optionally attributed to a project"""
    STATUS_RECEIVED = 'received'
    SETTLED_STATUS = STATUS_RECEIVED

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('received', 'Received'),
        ('overdue', 'Overdue'),
    ]

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    project = models.ForeignKey(Project, on_delete=models.SET_NULL, null=True, blank=True, related_name='receivables')

    class Meta(LedgerAccount.Meta):
        db_table = 'receivable_accounts'
        indexes = [
            models.Index(fields=['status', 'due_date'], name='idx_receivable_status_due'),
        ]
