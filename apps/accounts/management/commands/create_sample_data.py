"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 4 users (admin, alice, bob, charlie), all friends with each other
- 1 group (Goa Trip) with alice, bob and charlie
- Budget categories for alice
- Shared expenses split between the users
- Wallet top-ups and one partial debt repayment
- A payment reminder from alice to charlie
"""

from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User
from apps.accounts.services import add_friend
from apps.expenses.models import BudgetCategory, Expense
from apps.expenses.services import create_budget, create_expense
from apps.groups.models import Group
from apps.groups.services import create_group
from apps.notifications.models import Notification, PaymentReminder
from apps.notifications.services import create_reminder
from apps.wallet.models import WalletAccount, WalletTransaction
from apps.wallet.services import credit, pay_debt

SAMPLE_EMAILS = ['admin@example.com', 'alice@example.com', 'bob@example.com', 'charlie@example.com']


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Remove the sample users and everything they own first',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing sample data...')
            self.clear_data()

        if User.objects.filter(email__in=SAMPLE_EMAILS).exists():
            self.stdout.write(self.style.WARNING('Sample data already exists; use --clear to recreate it.'))
            return

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        group = self.create_group(users)
        budgets = self.create_budgets(users)
        self.create_expenses(users, group, budgets)
        self.create_wallets(users)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')
        self.stdout.write('  charlie@example.com / password123')

    def clear_data(self):
        """Delete the sample users and the rows that reference them."""
        users = User.objects.filter(email__in=SAMPLE_EMAILS)
        # PROTECT foreign keys; queryset delete skips WalletTransaction.delete()
        WalletTransaction.objects.filter(user__in=users).delete()
        WalletTransaction.objects.filter(creditor__in=users).delete()
        WalletAccount.objects.filter(user__in=users).delete()
        PaymentReminder.objects.filter(creditor__in=users).delete()
        Notification.objects.filter(user__in=users).delete()
        Expense.objects.filter(payer__in=users).delete()
        BudgetCategory.objects.filter(user__in=users).delete()
        Group.objects.filter(owner__in=users).delete()
        users.delete()

    def create_users(self):
        """Create test users and make them friends."""
        self.stdout.write('  Creating users...')

        admin = User.objects.create_superuser(
            email='admin@example.com',
            password='admin123',
            display_name='Admin User',
        )
        alice = User.objects.create_user(email='alice@example.com', password='password123', display_name='Alice')
        bob = User.objects.create_user(email='bob@example.com', password='password123', display_name='Bob')
        charlie = User.objects.create_user(email='charlie@example.com', password='password123', display_name='Charlie')

        add_friend(user=alice, friend_id=bob.id)
        add_friend(user=alice, friend_id=charlie.id)
        add_friend(user=bob, friend_id=charlie.id)

        return {
            'admin': admin,
            'alice': alice,
            'bob': bob,
            'charlie': charlie,
        }

    def create_group(self, users):
        self.stdout.write('  Creating group...')
        return create_group(
            name='Goa Trip',
            owner=users['alice'],
            member_ids=[users['bob'].id, users['charlie'].id],
        )

    def create_budgets(self, users):
        self.stdout.write('  Creating budgets...')
        alice = users['alice']
        return {
            'food': create_budget(user=alice, name='Food', budget_amount=Decimal('5000.00'), icon='🍽', color='#F59E0B'),
            'travel': create_budget(user=alice, name='Travel', budget_amount=Decimal('15000.00'), icon='✈', color='#3B82F6'),
        }

    def create_expenses(self, users, group, budgets):
        """Create shared expenses; every split list adds up to the amount."""
        self.stdout.write('  Creating expenses...')
        alice, bob, charlie = users['alice'], users['bob'], users['charlie']

        expenses_data = [
            {
                'user': alice,
                'description': 'Hotel booking',
                'amount': Decimal('9000.00'),
                'date': date(2024, 1, 1),
                'payer_id': alice.id,
                'group_id': group.id,
                'category_id': budgets['travel'].id,
                'splits': [
                    {'user_id': alice.id, 'amount_owed': Decimal('3000.00')},
                    {'user_id': bob.id, 'amount_owed': Decimal('3000.00')},
                    {'user_id': charlie.id, 'amount_owed': Decimal('3000.00')},
                ],
            },
            {
                'user': alice,
                'description': 'Beach shack dinner',
                'amount': Decimal('1800.00'),
                'date': date(2024, 1, 2),
                'payer_id': alice.id,
                'group_id': group.id,
                'category_id': budgets['food'].id,
                'splits': [
                    {'user_id': alice.id, 'amount_owed': Decimal('600.00')},
                    {'user_id': bob.id, 'amount_owed': Decimal('600.00')},
                    {'user_id': charlie.id, 'amount_owed': Decimal('600.00')},
                ],
            },
            {
                'user': bob,
                'description': 'Scooter rental',
                'amount': Decimal('1200.00'),
                'date': date(2024, 1, 3),
                'payer_id': bob.id,
                'group_id': group.id,
                'splits': [
                    {'user_id': alice.id, 'amount_owed': Decimal('400.00')},
                    {'user_id': bob.id, 'amount_owed': Decimal('400.00')},
                    {'user_id': charlie.id, 'amount_owed': Decimal('400.00')},
                ],
            },
            {
                'user': charlie,
                'description': 'Movie tickets',
                'amount': Decimal('750.00'),
                'date': date(2024, 1, 10),
                'payer_id': charlie.id,
                'splits': [
                    {'user_id': bob.id, 'amount_owed': Decimal('375.00')},
                    {'user_id': charlie.id, 'amount_owed': Decimal('375.00')},
                ],
            },
        ]

        for data in expenses_data:
            create_expense(**data)

    def create_wallets(self, users):
        """Top up wallets, settle part of a debt and send a reminder."""
        self.stdout.write('  Creating wallets...')
        alice, bob, charlie = users['alice'], users['bob'], users['charlie']

        credit(user=alice, amount=Decimal('2000.00'), description='Initial top up')
        credit(user=bob, amount=Decimal('5000.00'), description='Initial top up')
        credit(user=charlie, amount=Decimal('1000.00'), description='Initial top up')

        pay_debt(user=bob, amount=Decimal('3000.00'), creditor_id=alice.id)

        create_reminder(
            creditor=alice,
            debtor_id=charlie.id,
            amount=Decimal('3600.00'),
            description='Goa trip share',
        )
