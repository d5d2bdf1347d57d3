import django.db.models.deletion
from django.db import migrations, models

PAYMENT_METHODS = [
    ('cash', 'Cash'),
    ('pix', 'Pix'),
    ('credit_card', 'Credit card'),
    ('debit_card', 'Debit card'),
    ('bank_slip', 'Bank slip'),
    ('cheque', 'Cheque'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PayableAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('due_date', models.DateField()),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('payment_method', models.CharField(choices=PAYMENT_METHODS, default='cash', max_length=20)),
                ('installment_number', models.PositiveSmallIntegerField(default=1)),
                ('installment_count', models.PositiveSmallIntegerField(default=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('overdue', 'Overdue')], default='pending', max_length=20)),
            ],
            options={
                'db_table': 'payable_accounts',
                'ordering': ['due_date', 'id'],
                'abstract': False,
                'indexes': [models.Index(fields=['status', 'due_date'], name='idx_payable_status_due')],
            },
        ),
        migrations.CreateModel(
            name='ReceivableAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('due_date', models.DateField()),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('payment_method', models.CharField(choices=PAYMENT_METHODS, default='cash', max_length=20)),
                ('installment_number', models.PositiveSmallIntegerField(default=1)),
                ('installment_count', models.PositiveSmallIntegerField(default=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('received', 'Received'), ('overdue', 'Overdue')], default='pending', max_length=20)),
                ('project', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='receivables', to='projects.project')),
            ],
            options={
                'db_table': 'receivable_accounts',
                'ordering': ['due_date', 'id'],
                'abstract': False,
                'indexes': [models.Index(fields=['status', 'due_date'], name='idx_receivable_status_due')],
            },
        ),
    ]
