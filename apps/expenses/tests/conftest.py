import datetime
import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.accounts.services import add_friend
from apps.expenses.services import create_expense


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice(db):
    return User.objects.create_user(email='alice@example.com', password='TestPass123!', display_name='Alice')


@pytest.fixture
def bob(db):
    return User.objects.create_user(email='bob@example.com', password='TestPass123!', display_name='Bob')


@pytest.fixture
def carol(db):
    return User.objects.create_user(email='carol@example.com', password='TestPass123!', display_name='Carol')


@pytest.fixture
def friends(alice, bob, carol):
    """Alice is friends with Bob and Carol."""
    add_friend(user=alice, friend_id=bob.id)
    add_friend(user=alice, friend_id=carol.id)


@pytest.fixture
def make_expense():
    """
    Create an expense through the service.

    ``shares`` maps each participant to the amount they owe.
    """
    def _make(*, payer, shares, amount=None, date=datetime.date(2024, 1, 1), description='Dinner', **kwargs):
        splits = [{'user_id': user.id, 'amount_owed': Decimal(share)} for user, share in shares.items()]
        total = amount if amount is not None else sum((Decimal(s) for s in shares.values()), Decimal('0.00'))
        return create_expense(
            user=kwargs.pop('user', payer),
            description=description,
            amount=total,
            date=date,
            payer_id=payer.id,
            splits=splits,
            **kwargs,
        )
    return _make


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def alice_client(alice):
    """API client authenticated as Alice."""
    return _client_for(alice)


@pytest.fixture
def bob_client(bob):
    """API client authenticated as Bob."""
    return _client_for(bob)
