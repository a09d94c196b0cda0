import datetime
import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.groups.services import create_group


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def group_owner(db):
    """Create and return a test user (group owner)."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Group Owner',
    )


@pytest.fixture
def member_user(db):
    """Create and return a member user."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Group Member',
    )


@pytest.fixture
def group_other_user(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def group(group_owner, member_user):
    """A group of the owner and one member."""
    return create_group(name='Flatmates', owner=group_owner, member_ids=[member_user.id])


@pytest.fixture
def group_expense(group, group_owner):
    return Expense.objects.create(
        description='Groceries',
        amount=Decimal('120.50'),
        date=datetime.date(2024, 3, 1),
        payer=group_owner,
        created_by=group_owner,
        group=group,
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def owner_client(group_owner):
    """API client authenticated as the group owner."""
    return _client_for(group_owner)


@pytest.fixture
def other_client(group_other_user):
    """API client authenticated as a non-member."""
    return _client_for(group_other_user)
