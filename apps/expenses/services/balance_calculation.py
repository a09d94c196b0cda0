"""
Balance calculation service.

Every balance between users is derived from outstanding splits at read
time. Nothing here writes to the database.
"""

from decimal import Decimal
from typing import Dict, List

from django.conf import settings
from django.db.models import QuerySet, Sum

from apps.accounts.models import User
from apps.accounts.services import get_friends
from apps.expenses.models import Expense, Split
from apps.groups.models import Group

ZERO = Decimal('0.00')
CENT = Decimal('0.01')


def _total(queryset: QuerySet, field: str) -> Decimal:
    value = queryset.aggregate(total=Sum(field))['total']
    if value is None:
        return ZERO
    return Decimal(value).quantize(CENT)


def compute_summary(*, user: User) -> Dict[str, Decimal]:
    """
    Return how much the user has paid and how much they still owe.

    ``total_paid`` sums the amounts of expenses the user paid for;
    ``total_owed`` sums the outstanding shares assigned to the user,
    whoever paid.
    """
    return {
        'total_paid': _total(Expense.objects.filter(payer=user), 'amount'),
        'total_owed': _total(Split.objects.filter(user=user), 'amount_owed'),
    }


def amount_owed_to(*, debtor: User, creditor: User) -> Decimal:
    """Outstanding amount ``debtor`` owes on expenses ``creditor`` paid for."""
    return _total(
        Split.objects.filter(user=debtor, expense__payer=creditor),
        'amount_owed',
    )


def compute_friend_balance(*, user: User, friend: User) -> Decimal:
    """
    Net balance between the user and a friend.

    Positive means the friend owes the user, negative means the user owes
    the friend. The two directions are summed separately and never offset
    split by split.
    """
    owed_to_user = amount_owed_to(debtor=friend, creditor=user)
    owed_by_user = amount_owed_to(debtor=user, creditor=friend)
    return owed_to_user - owed_by_user


def friend_balance_breakdown(*, user: User, friend: User) -> dict:
    """Both directions of what is owed between the user and ``friend``, plus the net."""
    owed_to_user = amount_owed_to(debtor=friend, creditor=user)
    owed_by_user = amount_owed_to(debtor=user, creditor=friend)
    return {
        'friend': friend,
        'owed_to_user': owed_to_user,
        'owed_by_user': owed_by_user,
        'net_balance': owed_to_user - owed_by_user,
    }


def friend_balances(*, user: User) -> List[dict]:
    """
    Balance breakdown against every friend with something outstanding.

    Friends where neither side owes anything are left out.
    """
    balances = []
    for friend in get_friends(user=user):
        breakdown = friend_balance_breakdown(user=user, friend=friend)
        if breakdown['owed_to_user'] == ZERO and breakdown['owed_by_user'] == ZERO:
            continue
        balances.append(breakdown)
    return balances


def get_dashboard(*, user: User) -> dict:
    """Friend and group counts plus the user's most recent paid expenses."""
    limit = settings.NEXO_RECENT_EXPENSES_LIMIT
    recent = Expense.objects.filter(payer=user).order_by('-date', '-id')[:limit]
    return {
        'total_friends': user.friendships.count(),
        'total_groups': Group.objects.filter(memberships__user=user).distinct().count(),
        'recent_expenses': list(recent),
    }
