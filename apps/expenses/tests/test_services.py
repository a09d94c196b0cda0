"""
Service layer unit tests for expenses app.

Tests cover:
- Derived balances (summary, per-friend, dashboard)
- Expense creation, editing and deletion with their splits
- Budget categories and status labels
"""

import datetime
import pytest
from decimal import Decimal
from unittest.mock import patch

from apps.expenses.models import BudgetCategory, Expense, Split
from apps.expenses.services import expense_lifecycle
from apps.expenses.services import (
    compute_summary,
    amount_owed_to,
    compute_friend_balance,
    friend_balance_breakdown,
    friend_balances,
    get_dashboard,
    create_expense,
    update_expense,
    delete_expense,
    list_expenses,
    get_expense,
    budget_status,
    get_user_budgets,
    create_budget,
    update_budget,
    delete_budget,
)
from apps.expenses.services.exceptions import (
    ExpenseValidationError,
    ExpenseNotFoundError,
    PartiallyRepaidExpenseError,
    BudgetNotFoundError,
    BudgetValidationError,
)
from apps.groups.services import create_group
from apps.groups.services.exceptions import GroupNotFoundError
from apps.wallet.services import credit, pay_debt


# =============================================================================
# Balance Calculation Tests
# =============================================================================

@pytest.mark.django_db
class TestSummary:

    def test_new_user_has_zero_summary(self, alice):
        summary = compute_summary(user=alice)

        assert summary == {'total_paid': Decimal('0.00'), 'total_owed': Decimal('0.00')}

    def test_summary_counts_paid_and_owed(self, alice, bob, make_expense):
        make_expense(payer=alice, shares={alice: '50.00', bob: '50.00'})
        make_expense(payer=bob, shares={alice: '15.25', bob: '15.25'})

        assert compute_summary(user=alice) == {
            'total_paid': Decimal('100.00'),
            'total_owed': Decimal('65.25'),
        }
        assert compute_summary(user=bob) == {
            'total_paid': Decimal('30.50'),
            'total_owed': Decimal('65.25'),
        }

    def test_summary_is_read_only(self, alice, bob, make_expense):
        make_expense(payer=alice, shares={bob: '10.00'})
        before = list(Split.objects.values_list('id', 'amount_owed'))

        compute_summary(user=bob)

        assert list(Split.objects.values_list('id', 'amount_owed')) == before


@pytest.mark.django_db
class TestFriendBalance:

    def test_no_shared_expenses_is_zero(self, alice, bob, carol, make_expense):
        make_expense(payer=alice, shares={carol: '40.00'})

        assert compute_friend_balance(user=alice, friend=bob) == Decimal('0.00')
        assert compute_friend_balance(user=bob, friend=alice) == Decimal('0.00')

    def test_directions_are_summed_separately(self, alice, bob, make_expense):
        make_expense(payer=alice, shares={alice: '50.00', bob: '50.00'})
        make_expense(payer=bob, shares={alice: '30.00', bob: '30.00'})

        assert amount_owed_to(debtor=bob, creditor=alice) == Decimal('50.00')
        assert amount_owed_to(debtor=alice, creditor=bob) == Decimal('30.00')
        assert compute_friend_balance(user=alice, friend=bob) == Decimal('20.00')
        assert compute_friend_balance(user=bob, friend=alice) == Decimal('-20.00')

    def test_breakdown_for_a_non_friend(self, alice, carol, make_expense):
        make_expense(payer=alice, shares={carol: '40.00'})
        make_expense(payer=carol, shares={alice: '15.00'})

        breakdown = friend_balance_breakdown(user=alice, friend=carol)

        assert breakdown == {
            'friend': carol,
            'owed_to_user': Decimal('40.00'),
            'owed_by_user': Decimal('15.00'),
            'net_balance': Decimal('25.00'),
        }

    def test_payer_own_share_does_not_count(self, alice, bob, make_expense):
        make_expense(payer=alice, shares={alice: '70.00', bob: '30.00'})

        assert compute_friend_balance(user=alice, friend=bob) == Decimal('30.00')

    def test_friend_balances_skips_settled_friends(self, alice, bob, carol, friends, make_expense):
        make_expense(payer=alice, shares={bob: '25.00'})

        balances = friend_balances(user=alice)

        assert len(balances) == 1
        assert balances[0]['friend'] == bob
        assert balances[0]['owed_to_user'] == Decimal('25.00')
        assert balances[0]['owed_by_user'] == Decimal('0.00')
        assert balances[0]['net_balance'] == Decimal('25.00')


@pytest.mark.django_db
class TestDashboard:

    def test_dashboard(self, alice, bob, carol, friends, make_expense, settings):
        settings.NEXO_RECENT_EXPENSES_LIMIT = 2
        create_group(name='Trip', owner=alice, member_ids=[bob.id])
        first = make_expense(payer=alice, shares={bob: '10.00'}, date=datetime.date(2024, 1, 1))
        second = make_expense(payer=alice, shares={bob: '20.00'}, date=datetime.date(2024, 2, 1))
        third = make_expense(payer=alice, shares={bob: '30.00'}, date=datetime.date(2024, 2, 1))
        make_expense(payer=bob, shares={alice: '5.00'}, date=datetime.date(2024, 3, 1))

        dashboard = get_dashboard(user=alice)

        assert dashboard['total_friends'] == 2
        assert dashboard['total_groups'] == 1
        assert dashboard['recent_expenses'] == [third, second]
        assert first not in dashboard['recent_expenses']


# =============================================================================
# Expense Lifecycle Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateExpense:

    def test_create_writes_expense_and_splits(self, alice, bob):
        expense = create_expense(
            user=alice,
            description='  Taxi ',
            amount='45.00',
            date='2024-05-01',
            payer_id=alice.id,
            splits=[
                {'user_id': alice.id, 'amount_owed': '15.00'},
                {'user_id': bob.id, 'amount_owed': '30.00'},
            ],
        )

        assert expense.description == 'Taxi'
        assert expense.amount == Decimal('45.00')
        assert expense.date == datetime.date(2024, 5, 1)
        assert expense.created_by == alice
        splits = {s.user_id: s for s in expense.splits.all()}
        assert splits[bob.id].amount_owed == Decimal('30.00')
        assert splits[bob.id].original_amount == Decimal('30.00')

    @pytest.mark.parametrize('amount', ['0', '-5.00', '10.001', 'abc', None, '1e30', '-1e30'])
    def test_invalid_amount_rejected(self, alice, bob, amount):
        with pytest.raises(ExpenseValidationError):
            create_expense(
                user=alice,
                description='Taxi',
                amount=amount,
                date='2024-05-01',
                payer_id=alice.id,
                splits=[{'user_id': bob.id, 'amount_owed': '10.00'}],
            )
        assert Expense.objects.count() == 0

    def test_split_sum_must_match_amount(self, alice, bob):
        with pytest.raises(ExpenseValidationError, match='add up'):
            create_expense(
                user=alice,
                description='Taxi',
                amount='45.00',
                date='2024-05-01',
                payer_id=alice.id,
                splits=[{'user_id': bob.id, 'amount_owed': '40.00'}],
            )
        assert Expense.objects.count() == 0

    def test_empty_splits_rejected(self, alice):
        with pytest.raises(ExpenseValidationError):
            create_expense(
                user=alice, description='Taxi', amount='10.00', date='2024-05-01',
                payer_id=alice.id, splits=[],
            )

    def test_duplicate_participant_rejected(self, alice, bob):
        with pytest.raises(ExpenseValidationError, match='more than one split'):
            create_expense(
                user=alice, description='Taxi', amount='10.00', date='2024-05-01',
                payer_id=alice.id,
                splits=[
                    {'user_id': bob.id, 'amount_owed': '5.00'},
                    {'user_id': bob.id, 'amount_owed': '5.00'},
                ],
            )

    def test_negative_share_rejected(self, alice, bob):
        with pytest.raises(ExpenseValidationError):
            create_expense(
                user=alice, description='Taxi', amount='10.00', date='2024-05-01',
                payer_id=alice.id,
                splits=[
                    {'user_id': alice.id, 'amount_owed': '15.00'},
                    {'user_id': bob.id, 'amount_owed': '-5.00'},
                ],
            )

    def test_unknown_participant_rejected(self, alice):
        with pytest.raises(ExpenseValidationError, match='999999'):
            create_expense(
                user=alice, description='Taxi', amount='10.00', date='2024-05-01',
                payer_id=alice.id, splits=[{'user_id': 999999, 'amount_owed': '10.00'}],
            )

    def test_unknown_payer_rejected(self, alice):
        with pytest.raises(ExpenseValidationError):
            create_expense(
                user=alice, description='Taxi', amount='10.00', date='2024-05-01',
                payer_id=999999, splits=[{'user_id': alice.id, 'amount_owed': '10.00'}],
            )

    def test_blank_description_rejected(self, alice):
        with pytest.raises(ExpenseValidationError):
            create_expense(
                user=alice, description='  ', amount='10.00', date='2024-05-01',
                payer_id=alice.id, splits=[{'user_id': alice.id, 'amount_owed': '10.00'}],
            )

    def test_group_requires_membership(self, alice, bob, carol, make_expense):
        group = create_group(name='Trip', owner=bob, member_ids=[carol.id])

        with pytest.raises(GroupNotFoundError):
            make_expense(payer=alice, shares={bob: '10.00'}, group_id=group.id)

    def test_group_expense(self, alice, bob, make_expense):
        group = create_group(name='Trip', owner=alice, member_ids=[bob.id])

        expense = make_expense(payer=alice, shares={bob: '10.00'}, group_id=group.id)

        assert expense.group == group

    def test_category_must_belong_to_caller(self, alice, bob, make_expense):
        bobs_budget = BudgetCategory.objects.create(user=bob, name='Food', budget_amount=Decimal('100.00'))

        with pytest.raises(BudgetNotFoundError):
            make_expense(payer=alice, shares={bob: '10.00'}, category_id=bobs_budget.id)


@pytest.mark.django_db
class TestUpdateExpense:

    def _payload(self, payer, shares, amount):
        return {
            'description': 'Updated',
            'amount': amount,
            'date': '2024-06-01',
            'payer_id': payer.id,
            'splits': [{'user_id': u.id, 'amount_owed': a} for u, a in shares.items()],
        }

    def test_update_replaces_fields_and_splits(self, alice, bob, carol, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})

        update_expense(
            user=alice,
            expense_id=expense.id,
            **self._payload(alice, {bob: '30.00', carol: '30.00'}, '60.00'),
        )

        expense.refresh_from_db()
        assert expense.description == 'Updated'
        assert expense.amount == Decimal('60.00')
        assert sorted(expense.splits.values_list('user_id', 'amount_owed')) == sorted([
            (bob.id, Decimal('30.00')),
            (carol.id, Decimal('30.00')),
        ])

    def test_only_payer_or_creator_can_update(self, alice, bob, carol, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})

        with pytest.raises(ExpenseNotFoundError):
            update_expense(user=bob, expense_id=expense.id, **self._payload(alice, {bob: '5.00'}, '5.00'))
        with pytest.raises(ExpenseNotFoundError):
            update_expense(user=carol, expense_id=expense.id, **self._payload(alice, {bob: '5.00'}, '5.00'))

    def test_creator_who_is_not_payer_can_update(self, alice, bob, make_expense):
        expense = make_expense(payer=bob, shares={alice: '20.00'}, user=alice)

        update_expense(user=alice, expense_id=expense.id, **self._payload(bob, {alice: '25.00'}, '25.00'))

        expense.refresh_from_db()
        assert expense.amount == Decimal('25.00')

    def test_partially_repaid_expense_is_protected(self, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})
        Split.objects.filter(expense=expense).update(amount_owed=Decimal('5.00'))

        with pytest.raises(PartiallyRepaidExpenseError):
            update_expense(user=alice, expense_id=expense.id, **self._payload(alice, {bob: '40.00'}, '40.00'))

        expense.refresh_from_db()
        assert expense.amount == Decimal('20.00')
        assert expense.splits.get().amount_owed == Decimal('5.00')

    def test_repayment_during_edit_is_not_lost(self, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})
        credit(user=bob, amount='50.00')
        real_validated_fields = expense_lifecycle._validated_fields

        def repay_then_validate(**kwargs):
            pay_debt(user=bob, amount='5.00', creditor_id=alice.id)
            return real_validated_fields(**kwargs)

        with patch.object(expense_lifecycle, '_validated_fields', side_effect=repay_then_validate):
            with pytest.raises(PartiallyRepaidExpenseError):
                update_expense(user=alice, expense_id=expense.id, **self._payload(alice, {bob: '40.00'}, '40.00'))

        expense.refresh_from_db()
        assert expense.amount == Decimal('20.00')
        assert expense.splits.get().original_amount == Decimal('20.00')

    def test_discard_repayments_allows_edit(self, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})
        Split.objects.filter(expense=expense).update(amount_owed=Decimal('5.00'))

        update_expense(
            user=alice,
            expense_id=expense.id,
            discard_repayments=True,
            **self._payload(alice, {bob: '40.00'}, '40.00'),
        )

        split = expense.splits.get()
        assert split.amount_owed == Decimal('40.00')
        assert split.original_amount == Decimal('40.00')

    def test_invalid_update_keeps_old_splits(self, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})

        with pytest.raises(ExpenseValidationError):
            update_expense(user=alice, expense_id=expense.id, **self._payload(alice, {bob: '1.00'}, '40.00'))

        assert expense.splits.get().amount_owed == Decimal('20.00')


@pytest.mark.django_db
class TestDeleteAndList:

    def test_delete_removes_splits(self, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})

        delete_expense(user=alice, expense_id=expense.id)

        assert not Expense.objects.filter(id=expense.id).exists()
        assert not Split.objects.filter(expense_id=expense.id).exists()

    def test_participant_cannot_delete(self, alice, bob, make_expense):
        expense = make_expense(payer=alice, shares={bob: '20.00'})

        with pytest.raises(ExpenseNotFoundError):
            delete_expense(user=bob, expense_id=expense.id)

        assert Expense.objects.filter(id=expense.id).exists()

    def test_list_includes_paid_and_shared_newest_first(self, alice, bob, carol, make_expense):
        older = make_expense(payer=alice, shares={bob: '10.00'}, date=datetime.date(2024, 1, 1))
        newer = make_expense(payer=carol, shares={bob: '5.00', alice: '5.00'}, date=datetime.date(2024, 2, 1))
        make_expense(payer=carol, shares={bob: '7.00'}, date=datetime.date(2024, 3, 1))

        assert list(list_expenses(user=alice)) == [newer, older]

    def test_get_expense_hidden_from_outsiders(self, alice, bob, carol, make_expense):
        expense = make_expense(payer=alice, shares={bob: '10.00'})

        assert get_expense(user=bob, expense_id=expense.id) == expense
        with pytest.raises(ExpenseNotFoundError):
            get_expense(user=carol, expense_id=expense.id)


# =============================================================================
# Budget Tests
# =============================================================================

class TestBudgetStatus:

    @pytest.mark.parametrize('spent, label', [
        ('0.00', 'Good'),
        ('60.00', 'Good'),
        ('60.01', 'On Track'),
        ('80.01', 'Almost Exceeded'),
        ('100.00', 'Almost Exceeded'),
        ('100.01', 'Over Budget'),
    ])
    def test_thresholds(self, spent, label):
        assert budget_status(spent=Decimal(spent), budget_amount=Decimal('100.00')) == label


@pytest.mark.django_db
class TestBudgets:

    def test_spent_counts_own_expenses_in_category(self, alice, bob, make_expense):
        budget = create_budget(user=alice, name='Food', budget_amount=Decimal('200.00'), icon='🍕')
        make_expense(payer=alice, shares={bob: '50.00'}, category_id=budget.id)
        make_expense(payer=alice, shares={bob: '25.00'}, category_id=budget.id)
        make_expense(payer=alice, shares={bob: '99.00'})

        budgets = list(get_user_budgets(user=alice))

        assert len(budgets) == 1
        assert budgets[0].spent == Decimal('75.00')

    def test_duplicate_name_rejected(self, alice):
        create_budget(user=alice, name='Food', budget_amount=Decimal('100.00'))

        with pytest.raises(BudgetValidationError):
            create_budget(user=alice, name='Food', budget_amount=Decimal('50.00'))

    def test_non_positive_amount_rejected(self, alice):
        with pytest.raises(BudgetValidationError):
            create_budget(user=alice, name='Food', budget_amount=Decimal('0'))

    def test_update_budget(self, alice):
        budget = create_budget(user=alice, name='Food', budget_amount=Decimal('100.00'))

        updated = update_budget(user=alice, budget_id=budget.id, budget_amount=Decimal('150.00'))

        assert updated.budget_amount == Decimal('150.00')
        assert updated.name == 'Food'

    def test_cannot_touch_other_users_budget(self, alice, bob):
        budget = create_budget(user=alice, name='Food', budget_amount=Decimal('100.00'))

        with pytest.raises(BudgetNotFoundError):
            update_budget(user=bob, budget_id=budget.id, name='Mine')
        with pytest.raises(BudgetNotFoundError):
            delete_budget(user=bob, budget_id=budget.id)

    def test_delete_keeps_expenses(self, alice, bob, make_expense):
        budget = create_budget(user=alice, name='Food', budget_amount=Decimal('100.00'))
        expense = make_expense(payer=alice, shares={bob: '10.00'}, category_id=budget.id)

        delete_budget(user=alice, budget_id=budget.id)

        expense.refresh_from_db()
        assert expense.category is None
