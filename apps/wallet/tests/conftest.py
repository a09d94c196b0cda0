import datetime
import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.expenses.models import Split
from apps.expenses.services import create_expense
from apps.wallet.services import credit


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def creditor(db):
    """The user who paid for the shared expenses."""
    return User.objects.create_user(email='creditor@example.com', password='TestPass123!', display_name='Asha')


@pytest.fixture
def debtor(db):
    """The user who owes the creditor."""
    return User.objects.create_user(email='debtor@example.com', password='TestPass123!', display_name='Ravi')


@pytest.fixture
def third_user(db):
    return User.objects.create_user(email='third@example.com', password='TestPass123!', display_name='Meera')


@pytest.fixture
def owe():
    """
    Record that ``debtor`` owes ``amount`` on an expense paid by ``creditor``.

    Returns the debtor's Split.
    """
    def _owe(*, debtor, creditor, amount, date=datetime.date(2024, 1, 1)):
        expense = create_expense(
            user=creditor,
            description=f'Expense on {date}',
            amount=Decimal(amount),
            date=date,
            payer_id=creditor.id,
            splits=[{'user_id': debtor.id, 'amount_owed': Decimal(amount)}],
        )
        return Split.objects.get(expense=expense, user=debtor)
    return _owe


@pytest.fixture
def funded_debtor(debtor):
    """The debtor with 500.00 in their wallet."""
    credit(user=debtor, amount=Decimal('500.00'), description='Top up')
    return debtor


@pytest.fixture
def debtor_client(debtor):
    """API client authenticated as the debtor."""
    client = APIClient()
    refresh = RefreshToken.for_user(debtor)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
