import decimal
import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tasks', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReceiptBook',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('book_number', models.CharField(max_length=50, unique=True)),
                ('start_number', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('end_number', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='assigned_receipt_books', to=settings.AUTH_USER_MODEL)),
                ('closed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='closed_receipt_books', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='created_receipt_books', to=settings.AUTH_USER_MODEL)),
                ('task', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receipt_books', to='tasks.task')),
            ],
            options={
                'db_table': 'receipt_books',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['assigned_to'], name='books_assignee_idx'),
                    models.Index(fields=['task'], name='books_task_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('start_number__lte', models.F('end_number'))), name='receipt_book_start_lte_end'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Receipt',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('receipt_number', models.PositiveIntegerField()),
                ('giver_name', models.CharField(max_length=200)),
                ('address', models.CharField(max_length=300)),
                ('phone_number', models.CharField(blank=True, max_length=30)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('issued_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='issued_receipts', to=settings.AUTH_USER_MODEL)),
                ('receipt_book', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receipts', to='receipts.receiptbook')),
                ('task', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receipts', to='tasks.task')),
            ],
            options={
                'db_table': 'receipts',
                'ordering': ['-created_at', '-receipt_number'],
                'indexes': [
                    models.Index(fields=['created_at'], name='receipts_created_idx'),
                    models.Index(fields=['task', 'created_at'], name='receipts_task_created_idx'),
                    models.Index(fields=['issued_by'], name='receipts_issued_by_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('receipt_book', 'receipt_number'), name='unique_receipt_number_per_book'),
                ],
            },
        ),
    ]
