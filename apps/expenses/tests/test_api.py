import datetime
import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.expenses.models import Expense, Split


def _expense_payload(payer, shares, amount, **extra):
    payload = {
        'description': 'Dinner',
        'amount': amount,
        'date': '2024-04-01',
        'payer_id': payer.id,
        'splits': [{'user_id': u.id, 'amount_owed': a} for u, a in shares.items()],
    }
    payload.update(extra)
    return payload


@pytest.mark.django_db
class TestExpenseList:
    """Tests for GET/POST /api/expenses/"""

    def test_create_expense(self, alice_client, alice, bob):
        response = alice_client.post(
            reverse('expenses:expense-list'),
            _expense_payload(alice, {alice: '30.00', bob: '30.00'}, '60.00'),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '60.00'
        assert response.data['payer']['id'] == alice.id
        assert len(response.data['splits']) == 2
        assert Split.objects.filter(user=bob, amount_owed=Decimal('30.00')).exists()

    def test_create_with_mismatched_splits(self, alice_client, alice, bob):
        response = alice_client.post(
            reverse('expenses:expense-list'),
            _expense_payload(alice, {bob: '10.00'}, '60.00'),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data
        assert Expense.objects.count() == 0

    def test_create_with_three_decimals(self, alice_client, alice, bob):
        response = alice_client.post(
            reverse('expenses:expense-list'),
            _expense_payload(alice, {bob: '10.005'}, '10.005'),
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_in_foreign_group(self, alice_client, alice, bob):
        from apps.groups.services import create_group
        group = create_group(name='Not yours', owner=bob)

        response = alice_client.post(
            reverse('expenses:expense-list'),
            _expense_payload(alice, {bob: '10.00'}, '10.00', group_id=group.id),
            format='json',
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_expenses(self, alice_client, bob_client, alice, bob, make_expense):
        make_expense(payer=alice, shares={bob: '10.00'})

        response = bob_client.get(reverse('expenses:expense-list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['splits'][0]['amount_owed'] == '10.00'

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('expenses:expense-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestExpenseDetail:
    """Tests for GET/PUT/DELETE /api/expenses/{id}/"""

    def test_retrieve(self, bob_client, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '10.00'})

        response = bob_client.get(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == expense.id

    def test_update(self, alice_client, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '10.00'})

        response = alice_client.put(
            reverse('expenses:expense-detail', kwargs={'pk': expense.id}),
            _expense_payload(alice, {bob: '12.00'}, '12.00'),
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '12.00'

    def test_update_by_participant_is_not_found(self, bob_client, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '10.00'})

        response = bob_client.put(
            reverse('expenses:expense-detail', kwargs={'pk': expense.id}),
            _expense_payload(alice, {bob: '1.00'}, '1.00'),
            format='json',
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_repaid_expense_conflicts(self, alice_client, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '10.00'})
        Split.objects.filter(expense=expense).update(amount_owed=Decimal('4.00'))
        url = reverse('expenses:expense-detail', kwargs={'pk': expense.id})

        response = alice_client.put(url, _expense_payload(alice, {bob: '12.00'}, '12.00'), format='json')
        assert response.status_code == status.HTTP_409_CONFLICT

        response = alice_client.put(
            url,
            _expense_payload(alice, {bob: '12.00'}, '12.00', discard_repayments=True),
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK

    def test_delete(self, alice_client, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '10.00'})

        response = alice_client.delete(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Expense.objects.exists()
        assert not Split.objects.exists()


@pytest.mark.django_db
class TestBalances:
    """Tests for summary, dashboard and balance endpoints."""

    def test_summary_for_new_user(self, alice_client):
        response = alice_client.get(reverse('expenses:expense-summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'total_paid': '0.00', 'total_owed': '0.00'}

    def test_summary(self, alice_client, alice, bob, make_expense):
        make_expense(payer=alice, shares={alice: '50.00', bob: '50.00'})

        response = alice_client.get(reverse('expenses:expense-summary'))

        assert response.data == {'total_paid': '100.00', 'total_owed': '50.00'}

    def test_dashboard(self, alice_client, alice, bob, friends, make_expense):
        make_expense(payer=alice, shares={bob: '10.00'}, date=datetime.date(2024, 1, 2))

        response = alice_client.get(reverse('expenses:expense-dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_friends'] == 2
        assert response.data['total_groups'] == 0
        assert response.data['recent_expenses'][0]['amount'] == '10.00'

    def test_balances(self, alice_client, alice, bob, friends, make_expense):
        make_expense(payer=alice, shares={bob: '10.00'})

        response = alice_client.get(reverse('expenses:expense-balances'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['friend']['id'] == bob.id
        assert response.data[0]['net_balance'] == '10.00'

    def test_friend_balance(self, bob_client, alice, bob, make_expense):
        make_expense(payer=alice, shares={bob: '10.00'})
        make_expense(payer=bob, shares={alice: '4.00'})

        response = bob_client.get(reverse('expenses:expense-friend-balance', kwargs={'friend_id': alice.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['owed_to_user'] == '4.00'
        assert response.data['owed_by_user'] == '10.00'
        assert response.data['net_balance'] == '-6.00'

    def test_friend_balance_unknown_user(self, alice_client):
        response = alice_client.get(reverse('expenses:expense-friend-balance', kwargs={'friend_id': 999999}))
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestBudgetsApi:
    """Tests for /api/expenses/budgets/"""

    def test_create_and_list(self, alice_client, alice, bob, make_expense):
        response = alice_client.post(
            reverse('expenses:budget-list'),
            {'name': 'Food', 'budget_amount': '100.00', 'icon': '🍕'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        make_expense(payer=alice, shares={bob: '85.00'}, category_id=response.data['id'])

        response = alice_client.get(reverse('expenses:budget-list'))

        assert response.data[0]['spent'] == '85.00'
        assert response.data[0]['remaining'] == '15.00'
        assert response.data[0]['status'] == 'Almost Exceeded'

    def test_duplicate_name(self, alice_client):
        url = reverse('expenses:budget-list')
        alice_client.post(url, {'name': 'Food', 'budget_amount': '100.00'}, format='json')

        response = alice_client.post(url, {'name': 'Food', 'budget_amount': '50.00'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_partial_update_and_delete(self, alice_client):
        created = alice_client.post(
            reverse('expenses:budget-list'),
            {'name': 'Food', 'budget_amount': '100.00'},
            format='json',
        )
        url = reverse('expenses:budget-detail', kwargs={'pk': created.data['id']})

        response = alice_client.patch(url, {'budget_amount': '250.00'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['budget_amount'] == '250.00'

        response = alice_client.delete(url)
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert alice_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_other_users_budget_not_found(self, alice_client, bob_client):
        created = alice_client.post(
            reverse('expenses:budget-list'),
            {'name': 'Food', 'budget_amount': '100.00'},
            format='json',
        )

        response = bob_client.get(reverse('expenses:budget-detail', kwargs={'pk': created.data['id']}))
        assert response.status_code == status.HTTP_404_NOT_FOUND
