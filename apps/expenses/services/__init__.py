"""
Expenses app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    ExpensesServiceError,
    ExpenseValidationError,
    ExpenseNotFoundError,
    PartiallyRepaidExpenseError,
    BudgetNotFoundError,
    BudgetValidationError,
)

from .balance_calculation import (
    compute_summary,
    amount_owed_to,
    compute_friend_balance,
    friend_balance_breakdown,
    friend_balances,
    get_dashboard,
)

from .expense_lifecycle import (
    create_expense,
    update_expense,
    delete_expense,
    list_expenses,
    get_expense,
)

from .budget_management import (
    budget_status,
    get_user_budgets,
    get_budget,
    create_budget,
    update_budget,
    delete_budget,
)


__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'ExpenseValidationError',
    'ExpenseNotFoundError',
    'PartiallyRepaidExpenseError',
    'BudgetNotFoundError',
    'BudgetValidationError',

    # Balance Calculation
    'compute_summary',
    'amount_owed_to',
    'compute_friend_balance',
    'friend_balance_breakdown',
    'friend_balances',
    'get_dashboard',

    # Expense Lifecycle
    'create_expense',
    'update_expense',
    'delete_expense',
    'list_expenses',
    'get_expense',

    # Budget Management
    'budget_status',
    'get_user_budgets',
    'get_budget',
    'create_budget',
    'update_budget',
    'delete_budget',
]
