"""
Budget management service.

Budget categories belong to a single user. Spending is derived from the
user's own expenses filed under each category.
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import DecimalField, Q, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.expenses.models import BudgetCategory

from .exceptions import BudgetNotFoundError, BudgetValidationError

logger = logging.getLogger(__name__)

# (threshold percentage, label), checked from the top down
BUDGET_STATUS_THRESHOLDS = (
    (Decimal('100'), 'Over Budget'),
    (Decimal('80'), 'Almost Exceeded'),
    (Decimal('60'), 'On Track'),
)
DEFAULT_BUDGET_STATUS = 'Good'


def budget_status(*, spent: Decimal, budget_amount: Decimal) -> str:
    """Label a budget by how much of it has been spent."""
    if budget_amount <= 0:
        return DEFAULT_BUDGET_STATUS
    percentage = spent / budget_amount * 100
    for threshold, label in BUDGET_STATUS_THRESHOLDS:
        if percentage > threshold:
            return label
    return DEFAULT_BUDGET_STATUS


def get_user_budgets(*, user: User) -> QuerySet[BudgetCategory]:
    """The user's budget categories annotated with ``spent``."""
    money = DecimalField(max_digits=12, decimal_places=2)
    return (
        BudgetCategory.objects
        .filter(user=user)
        .annotate(
            spent=Coalesce(
                Sum('expenses__amount', filter=Q(expenses__payer=user)),
                Value(Decimal('0.00')),
                output_field=money,
            )
        )
        .order_by('name')
    )


def get_budget(*, user: User, budget_id) -> BudgetCategory:
    """
    Raises:
        BudgetNotFoundError: If the category is missing or belongs to someone else
    """
    budget = get_user_budgets(user=user).filter(id=budget_id).first()
    if budget is None:
        raise BudgetNotFoundError(f"Budget category with ID {budget_id} not found")
    return budget


def _save(budget: BudgetCategory) -> None:
    try:
        with transaction.atomic():
            budget.save()
    except IntegrityError:
        raise BudgetValidationError(f"A budget named '{budget.name}' already exists")


def create_budget(*, user: User, name: str, budget_amount, icon: str = '', color: str = '') -> BudgetCategory:
    """
    Create a budget category for the user.

    Raises:
        BudgetValidationError: If the name is blank, duplicated, or the amount is not positive
    """
    name = (name or '').strip()
    if not name:
        raise BudgetValidationError("Budget name is required")
    if budget_amount is None or Decimal(budget_amount) <= 0:
        raise BudgetValidationError("Budget amount must be positive")

    budget = BudgetCategory(user=user, name=name, budget_amount=budget_amount, icon=icon, color=color)
    _save(budget)
    logger.info("Budget category %s created for user %s", budget.id, user.id)
    return get_budget(user=user, budget_id=budget.id)


def update_budget(*, user: User, budget_id, **changes) -> BudgetCategory:
    """
    Update name, amount, icon or color of one of the user's budgets.

    Raises:
        BudgetNotFoundError: If the category is not the user's
        BudgetValidationError: If the new values are invalid
    """
    budget = BudgetCategory.objects.filter(id=budget_id, user=user).first()
    if budget is None:
        raise BudgetNotFoundError(f"Budget category with ID {budget_id} not found")

    if 'name' in changes:
        changes['name'] = (changes['name'] or '').strip()
        if not changes['name']:
            raise BudgetValidationError("Budget name is required")
    if 'budget_amount' in changes and Decimal(changes['budget_amount']) <= 0:
        raise BudgetValidationError("Budget amount must be positive")

    for field in ('name', 'budget_amount', 'icon', 'color'):
        if field in changes:
            setattr(budget, field, changes[field])
    _save(budget)

    return get_budget(user=user, budget_id=budget.id)


def delete_budget(*, user: User, budget_id) -> None:
    """
    Delete a budget category. Expenses filed under it are kept, uncategorised.

    Raises:
        BudgetNotFoundError: If the category is not the user's
    """
    deleted, _ = BudgetCategory.objects.filter(id=budget_id, user=user).delete()
    if not deleted:
        raise BudgetNotFoundError(f"Budget category with ID {budget_id} not found")
    logger.info("Budget category %s deleted by user %s", budget_id, user.id)
