import datetime
import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.accounts.services import add_friend
from apps.expenses.services import create_expense
from apps.notifications.services import broker


@pytest.fixture(autouse=True)
def clean_broker():
    """Keep subscriptions from leaking between tests."""
    broker.clear()
    yield
    broker.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def lender(db):
    """User who paid for shared expenses."""
    return User.objects.create_user(email='lender@example.com', password='TestPass123!', display_name='Lena')


@pytest.fixture
def borrower(db):
    """Friend of the lender who owes them money."""
    return User.objects.create_user(email='borrower@example.com', password='TestPass123!', display_name='Bo')


@pytest.fixture
def stranger(db):
    return User.objects.create_user(email='stranger@example.com', password='TestPass123!')


@pytest.fixture
def lender_friends(lender, borrower):
    add_friend(user=lender, friend_id=borrower.id)
    return lender


@pytest.fixture
def shared_dinner(lender, borrower):
    """Dinner for 90.00 paid by the lender; the borrower owes 45.00."""
    return create_expense(
        user=lender,
        description='Dinner',
        amount=Decimal('90.00'),
        date=datetime.date(2024, 1, 1),
        payer_id=lender.id,
        splits=[
            {'user_id': lender.id, 'amount_owed': Decimal('45.00')},
            {'user_id': borrower.id, 'amount_owed': Decimal('45.00')},
        ],
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def lender_client(lender):
    return _client_for(lender)


@pytest.fixture
def borrower_client(borrower):
    return _client_for(borrower)
