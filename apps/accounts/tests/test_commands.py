"""
Tests for the create_sample_data management command.
"""

import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command

from apps.accounts.models import Friendship, User
from apps.expenses.models import Expense
from apps.expenses.services import compute_friend_balance
from apps.notifications.models import PaymentReminder
from apps.wallet.models import WalletAccount


@pytest.mark.django_db
class TestCreateSampleData:

    def test_creates_consistent_data(self):
        out = StringIO()

        call_command('create_sample_data', stdout=out)

        assert 'Sample data created successfully!' in out.getvalue()
        alice = User.objects.get(email='alice@example.com')
        bob = User.objects.get(email='bob@example.com')
        assert Friendship.objects.filter(user=alice).count() == 2
        assert Expense.objects.count() == 4
        assert WalletAccount.objects.get(user=bob).balance == Decimal('2000.00')
        assert compute_friend_balance(user=alice, friend=bob) == Decimal('200.00')
        assert PaymentReminder.objects.filter(creditor=alice).count() == 1

    def test_second_run_is_a_no_op(self):
        call_command('create_sample_data', stdout=StringIO())
        out = StringIO()

        call_command('create_sample_data', stdout=out)

        assert 'already exists' in out.getvalue()
        assert Expense.objects.count() == 4

    def test_clear_recreates(self):
        call_command('create_sample_data', stdout=StringIO())

        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert User.objects.filter(email='alice@example.com').count() == 1
        assert Expense.objects.count() == 4
        assert WalletAccount.objects.count() == 3
