from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    ExpenseInputSerializer,
    ExpenseSerializer,
    SummarySerializer,
    DashboardSerializer,
    FriendBalanceSerializer,
    BudgetInputSerializer,
    BudgetSerializer,
)

from apps.accounts.services import get_user_by_id, UserNotFoundError
from apps.expenses.services import (
    create_expense,
    update_expense,
    delete_expense,
    list_expenses,
    get_expense,
    compute_summary,
    friend_balance_breakdown,
    friend_balances,
    get_dashboard,
    get_user_budgets,
    get_budget,
    create_budget,
    update_budget,
    delete_budget,
    # Exceptions
    ExpenseValidationError,
    ExpenseNotFoundError,
    PartiallyRepaidExpenseError,
    BudgetNotFoundError,
    BudgetValidationError,
)
from apps.groups.services import GroupNotFoundError


def _expense_error_response(error):
    if isinstance(error, ExpenseValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, PartiallyRepaidExpenseError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_404_NOT_FOUND
    return Response({'error': str(error)}, status=code)


class ExpenseViewSet(viewsets.ViewSet):
    """
    ViewSet for expenses and derived balances.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Expenses the user paid or shares in
    create: Record an expense with splits
    retrieve: Get a single expense
    update: Replace an expense and its splits
    destroy: Delete an expense
    summary: Total paid and total owed
    dashboard: Counts and recent expenses
    balances: Per-friend balances
    friend_balance: Balance against one user
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    @extend_schema(responses={200: ExpenseSerializer(many=True)}, tags=['expenses'])
    def list(self, request):
        """List the user's expenses, newest first."""
        expenses = list_expenses(user=request.user)
        return Response(ExpenseSerializer(expenses, many=True).data)

    @extend_schema(request=ExpenseInputSerializer, responses={201: ExpenseSerializer}, tags=['expenses'])
    def create(self, request):
        """Record a new expense."""
        serializer = ExpenseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data.copy()
        data.pop('discard_repayments', None)

        try:
            expense = create_expense(user=request.user, **data)
        except (ExpenseValidationError, GroupNotFoundError, BudgetNotFoundError) as e:
            return _expense_error_response(e)

        expense = get_expense(user=request.user, expense_id=expense.id)
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ExpenseSerializer}, tags=['expenses'])
    def retrieve(self, request, pk=None):
        """Get an expense the user paid or shares in."""
        try:
            expense = get_expense(user=request.user, expense_id=pk)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(request=ExpenseInputSerializer, responses={200: ExpenseSerializer}, tags=['expenses'])
    def update(self, request, pk=None):
        """Replace an expense's fields and splits."""
        serializer = ExpenseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            update_expense(user=request.user, expense_id=pk, **serializer.validated_data)
        except (
            ExpenseValidationError,
            ExpenseNotFoundError,
            PartiallyRepaidExpenseError,
            GroupNotFoundError,
            BudgetNotFoundError,
        ) as e:
            return _expense_error_response(e)

        expense = get_expense(user=request.user, expense_id=pk)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(responses={204: None}, tags=['expenses'])
    def destroy(self, request, pk=None):
        """Delete an expense and its splits."""
        try:
            delete_expense(user=request.user, expense_id=pk)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: SummarySerializer}, tags=['balances'])
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Total paid by the user and total they still owe."""
        return Response(SummarySerializer(compute_summary(user=request.user)).data)

    @extend_schema(responses={200: DashboardSerializer}, tags=['balances'])
    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        """Friend and group counts plus recent expenses."""
        return Response(DashboardSerializer(get_dashboard(user=request.user)).data)

    @extend_schema(responses={200: FriendBalanceSerializer(many=True)}, tags=['balances'])
    @action(detail=False, methods=['get'])
    def balances(self, request):
        """Balances against every friend with something outstanding."""
        serializer = FriendBalanceSerializer(friend_balances(user=request.user), many=True)
        return Response(serializer.data)

    @extend_schema(responses={200: FriendBalanceSerializer}, tags=['balances'])
    @action(detail=False, methods=['get'], url_path=r'balances/(?P<friend_id>\d+)')
    def friend_balance(self, request, friend_id=None):
        """Balance between the user and one other user."""
        try:
            friend = get_user_by_id(user_id=friend_id)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        breakdown = friend_balance_breakdown(user=request.user, friend=friend)
        return Response(FriendBalanceSerializer(breakdown).data)


class BudgetViewSet(viewsets.ViewSet):
    """
    ViewSet for the user's budget categories.

    list, create, retrieve, update, partial_update, destroy
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    @extend_schema(responses={200: BudgetSerializer(many=True)}, tags=['budgets'])
    def list(self, request):
        return Response(BudgetSerializer(get_user_budgets(user=request.user), many=True).data)

    @extend_schema(request=BudgetInputSerializer, responses={201: BudgetSerializer}, tags=['budgets'])
    def create(self, request):
        serializer = BudgetInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            budget = create_budget(user=request.user, **serializer.validated_data)
        except BudgetValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(BudgetSerializer(budget).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: BudgetSerializer}, tags=['budgets'])
    def retrieve(self, request, pk=None):
        try:
            budget = get_budget(user=request.user, budget_id=pk)
        except BudgetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(BudgetSerializer(budget).data)

    def _update(self, request, pk, partial):
        serializer = BudgetInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            budget = update_budget(user=request.user, budget_id=pk, **serializer.validated_data)
        except BudgetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BudgetValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(BudgetSerializer(budget).data)

    @extend_schema(request=BudgetInputSerializer, responses={200: BudgetSerializer}, tags=['budgets'])
    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    @extend_schema(request=BudgetInputSerializer, responses={200: BudgetSerializer}, tags=['budgets'])
    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    @extend_schema(responses={204: None}, tags=['budgets'])
    def destroy(self, request, pk=None):
        try:
            delete_budget(user=request.user, budget_id=pk)
        except BudgetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
