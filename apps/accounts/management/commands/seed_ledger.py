"""
Management command to seed a fresh ledger.

Usage:
    python manage.py seed_ledger
    python manage.py seed_ledger --with-receipts
    python manage.py seed_ledger --clear

This creates:
- 3 users (admin, manager, collector) with one of each role
- Income tasks (Construction, Zakat, General Fund)
- Expense types (Utilities, Maintenance, Salaries)
- One receipt book per task, the first assigned to the collector
- With --with-receipts: a few receipts and an expense
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal
from datetime import date

from apps.accounts.models import User, UserRole
from apps.expenses.models import Expense, ExpenseType
from apps.receipts.models import Receipt, ReceiptBook
from apps.reports.models import PublishedReport
from apps.tasks.models import Task

SEED_USERS = [
    ('admin', 'admin123', 'Administrator', UserRole.ADMIN),
    ('manager', 'manager123', 'Treasurer', UserRole.MANAGER),
    ('collector', 'collector123', 'Cash Collector', UserRole.CASH_COLLECTOR),
]

SEED_TASKS = [
    ('Construction', 'Building fund for the new hall'),
    ('Zakat', 'Obligatory alms'),
    ('General Fund', 'Day-to-day running costs'),
]

SEED_EXPENSE_TYPES = [
    ('Utilities', 'Electricity, water and gas'),
    ('Maintenance', 'Repairs and cleaning'),
    ('Salaries', 'Staff payments'),
]


class Command(BaseCommand):
    help = 'Create initial users, tasks, expense types and receipt books'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete ledger data (not superusers) before seeding',
        )
        parser.add_argument(
            '--with-receipts',
            action='store_true',
            help='Also issue a few sample receipts and record an expense',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Seeding ledger...')

        users = self.create_users()
        tasks = self.create_tasks()
        self.create_expense_types()
        books = self.create_books(users, tasks)

        if options['with_receipts']:
            self.create_receipts(users, books)

        self.stdout.write(self.style.SUCCESS('Ledger seeded successfully!'))
        self.stdout.write('')
        self.stdout.write('Accounts:')
        for username, password, _, role in SEED_USERS:
            self.stdout.write(f'  {username} / {password} ({role.label})')

    def clear_data(self):
        """Delete ledger records in dependency order."""
        PublishedReport.objects.all().delete()
        Receipt.objects.all().delete()
        ReceiptBook.objects.all().delete()
        Expense.objects.all().delete()
        ExpenseType.objects.all().delete()
        Task.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def create_users(self):
        self.stdout.write('  Creating users...')

        users = {}
        for username, password, display_name, role in SEED_USERS:
            user, created = User.objects.get_or_create(
                username=username,
                defaults={
                    'display_name': display_name,
                    'role': role,
                    'is_staff': role == UserRole.ADMIN,
                    'is_superuser': role == UserRole.ADMIN,
                }
            )
            if created:
                user.set_password(password)
                user.save()
            users[role] = user
        return users

    def create_tasks(self):
        self.stdout.write('  Creating tasks...')
        return [
            Task.objects.get_or_create(name=name, defaults={'description': description})[0]
            for name, description in SEED_TASKS
        ]

    def create_expense_types(self):
        self.stdout.write('  Creating expense types...')
        for name, description in SEED_EXPENSE_TYPES:
            ExpenseType.objects.get_or_create(name=name, defaults={'description': description})

    def create_books(self, users, tasks):
        self.stdout.write('  Creating receipt books...')

        books = []
        for index, task in enumerate(tasks):
            start = index * 100 + 1
            book, _ = ReceiptBook.objects.get_or_create(
                book_number=f'B-{index + 1:03d}',
                defaults={
                    'task': task,
                    'start_number': start,
                    'end_number': start + 99,
                    'assigned_to': users[UserRole.CASH_COLLECTOR] if index == 0 else None,
                    'created_by': users[UserRole.ADMIN],
                }
            )
            books.append(book)
        return books

    def create_receipts(self, users, books):
        self.stdout.write('  Issuing sample receipts...')

        book = books[0]
        collector = users[UserRole.CASH_COLLECTOR]
        donors = [
            ('Aisha Rahman', '12 Mill Lane', Decimal('500.00')),
            ('Yusuf Khan', '4 Station Road', Decimal('250.00')),
            ('Maryam Ali', '9 Park View', Decimal('750.00')),
        ]
        for offset, (giver_name, address, amount) in enumerate(donors):
            Receipt.objects.get_or_create(
                receipt_book=book,
                receipt_number=book.start_number + offset,
                defaults={
                    'task': book.task,
                    'giver_name': giver_name,
                    'address': address,
                    'amount': amount,
                    'issued_by': collector,
                }
            )

        Expense.objects.get_or_create(
            expense_type=ExpenseType.objects.get(name='Utilities'),
            date=date.today(),
            defaults={
                'amount': Decimal('400.00'),
                'description': 'Electricity bill',
                'recorded_by': users[UserRole.MANAGER],
            }
        )
