"""
Expense lifecycle service.

Creates, edits and deletes expenses together with their splits. Each
operation writes the expense and all of its splits in one transaction, so
readers never see an expense with a partial set of splits.
"""

import datetime
import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.expenses.models import BudgetCategory, Expense, Split
from apps.groups.services import GroupNotFoundError, is_group_member

from .exceptions import (
    BudgetNotFoundError,
    ExpenseNotFoundError,
    ExpenseValidationError,
    PartiallyRepaidExpenseError,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
MAX_AMOUNT = Decimal('9999999999.99')


def _parse_amount(value, field: str, allow_zero: bool = False) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ExpenseValidationError(f"{field} must be a number")

    if not amount.is_finite():
        raise ExpenseValidationError(f"{field} must be a number")
    if abs(amount) > MAX_AMOUNT:
        raise ExpenseValidationError(f"{field} cannot exceed {MAX_AMOUNT}")
    if amount != amount.quantize(CENT):
        raise ExpenseValidationError(f"{field} cannot have more than 2 decimal places")
    if amount < 0 or (amount == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ExpenseValidationError(f"{field} must be {qualifier}")
    return amount.quantize(CENT)


def _parse_date(value) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value))
    except ValueError:
        raise ExpenseValidationError("date must be an ISO date (YYYY-MM-DD)")


def _resolve_splits(*, amount: Decimal, splits: Iterable[dict]) -> List[tuple]:
    """Validate split input and return ``(user, amount)`` pairs in input order."""
    rows = list(splits or [])
    if not rows:
        raise ExpenseValidationError("At least one split is required")

    parsed = []
    seen = set()
    for row in rows:
        try:
            user_id = int(row['user_id'])
        except (KeyError, TypeError, ValueError):
            raise ExpenseValidationError("Each split needs a user_id")
        if user_id in seen:
            raise ExpenseValidationError(f"User {user_id} appears in more than one split")
        seen.add(user_id)
        parsed.append((user_id, _parse_amount(row.get('amount_owed'), 'amount_owed', allow_zero=True)))

    users = User.objects.in_bulk([user_id for user_id, _ in parsed])
    missing = [user_id for user_id, _ in parsed if user_id not in users or not users[user_id].is_active]
    if missing:
        raise ExpenseValidationError(
            f"Unknown split participant(s): {', '.join(str(m) for m in missing)}"
        )

    total = sum((share for _, share in parsed), Decimal('0.00'))
    if total != amount:
        raise ExpenseValidationError(
            f"Split amounts add up to {total} but the expense amount is {amount}"
        )

    return [(users[user_id], share) for user_id, share in parsed]


def _validated_fields(
    *,
    user: User,
    description: str,
    amount,
    date,
    payer_id,
    splits: Iterable[dict],
    group_id=None,
    category_id=None,
) -> dict:
    description = (description or '').strip()
    if not description:
        raise ExpenseValidationError("Description is required")

    amount = _parse_amount(amount, 'amount')
    date = _parse_date(date)

    try:
        payer = User.objects.get(id=payer_id, is_active=True)
    except (User.DoesNotExist, ValueError, TypeError):
        raise ExpenseValidationError(f"Unknown payer {payer_id}")

    if group_id is not None and not is_group_member(group_id=group_id, user_id=user.id):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    category = None
    if category_id is not None:
        category = BudgetCategory.objects.filter(id=category_id, user=user).first()
        if category is None:
            raise BudgetNotFoundError(f"Budget category with ID {category_id} not found")

    return {
        'description': description,
        'amount': amount,
        'date': date,
        'payer': payer,
        'group_id': group_id,
        'category': category,
        'shares': _resolve_splits(amount=amount, splits=splits),
    }


def _write_splits(expense: Expense, shares: List[tuple]) -> None:
    Split.objects.bulk_create([
        Split(expense=expense, user=participant, amount_owed=share, original_amount=share)
        for participant, share in shares
    ])


@transaction.atomic
def create_expense(
    *,
    user: User,
    description: str,
    amount,
    date,
    payer_id,
    splits: Iterable[dict],
    group_id=None,
    category_id=None,
) -> Expense:
    """
    Record a new expense with its splits.

    Args:
        user: The user recording the expense
        description: What the money was spent on
        amount: Total paid, positive with at most 2 decimal places
        date: Date of the expense
        payer_id: Who paid
        splits: ``[{'user_id': ..., 'amount_owed': ...}, ...]``; one row per
            participant, amounts adding up to ``amount``
        group_id: Optional group the caller belongs to
        category_id: Optional budget category owned by the caller

    Returns:
        Created Expense instance

    Raises:
        ExpenseValidationError: If any field or split is invalid
        GroupNotFoundError: If the caller is not in the group
        BudgetNotFoundError: If the category is not the caller's
    """
    fields = _validated_fields(
        user=user,
        description=description,
        amount=amount,
        date=date,
        payer_id=payer_id,
        splits=splits,
        group_id=group_id,
        category_id=category_id,
    )
    shares = fields.pop('shares')

    expense = Expense.objects.create(created_by=user, **fields)
    _write_splits(expense, shares)

    logger.info(
        "Expense %s created by user %s: %s paid by %s across %d split(s)",
        expense.id, user.id, expense.amount, expense.payer_id, len(shares)
    )
    return expense


def _get_editable_expense(*, user: User, expense_id) -> Expense:
    expense = (
        Expense.objects
        .select_for_update()
        .filter(Q(payer=user) | Q(created_by=user), id=expense_id)
        .first()
    )
    if expense is None:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")
    return expense


@transaction.atomic
def update_expense(
    *,
    user: User,
    expense_id,
    description: str,
    amount,
    date,
    payer_id,
    splits: Iterable[dict],
    group_id=None,
    category_id=None,
    discard_repayments: bool = False,
) -> Expense:
    """
    Replace an expense's fields and splits.

    Splits are rebuilt from scratch, so any repayment already applied to
    the old splits would be lost. That only happens when the caller opts
    in with ``discard_repayments=True``.

    Raises:
        ExpenseNotFoundError: If the expense does not exist or the user is
            neither its payer nor its creator
        PartiallyRepaidExpenseError: If repayments exist and were not discarded
        ExpenseValidationError: If the new data is invalid
    """
    expense = _get_editable_expense(user=user, expense_id=expense_id)

    fields = _validated_fields(
        user=user,
        description=description,
        amount=amount,
        date=date,
        payer_id=payer_id,
        splits=splits,
        group_id=group_id,
        category_id=category_id,
    )
    shares = fields.pop('shares')

    # Splits stay locked until commit, so a repayment either lands before
    # this check or waits for the rewrite
    locked_splits = list(expense.splits.select_for_update())
    if not discard_repayments and any(s.amount_owed < s.original_amount for s in locked_splits):
        logger.warning("Edit of repaid expense %s by user %s refused", expense.id, user.id)
        raise PartiallyRepaidExpenseError(
            "This expense has already been partly repaid; "
            "editing it would discard those repayments"
        )

    for name, value in fields.items():
        setattr(expense, name, value)
    expense.save()

    expense.splits.all().delete()
    _write_splits(expense, shares)

    logger.info("Expense %s updated by user %s", expense.id, user.id)
    return expense


@transaction.atomic
def delete_expense(*, user: User, expense_id) -> None:
    """
    Delete an expense and its splits.

    Raises:
        ExpenseNotFoundError: If the expense does not exist or the user is
            neither its payer nor its creator
    """
    expense = _get_editable_expense(user=user, expense_id=expense_id)
    expense.splits.all().delete()
    expense.delete()
    logger.info("Expense %s deleted by user %s", expense_id, user.id)


def list_expenses(*, user: User) -> QuerySet[Expense]:
    """Expenses the user paid for or shares in, newest first."""
    return (
        Expense.objects
        .filter(Q(payer=user) | Q(splits__user=user))
        .select_related('payer', 'group', 'category')
        .prefetch_related('splits__user')
        .distinct()
        .order_by('-date', '-id')
    )


def get_expense(*, user: User, expense_id) -> Expense:
    """
    Fetch one expense the user paid for or shares in.

    Raises:
        ExpenseNotFoundError: If the expense is not visible to the user
    """
    expense = list_expenses(user=user).filter(id=expense_id).first()
    if expense is None:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")
    return expense
