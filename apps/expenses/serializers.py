from rest_framework import serializers
from .models import BudgetCategory, Expense, Split
from .services import budget_status
from apps.accounts.serializers import UserPublicSerializer


# =============================================================================
# Input Serializers
# =============================================================================

class SplitInputSerializer(serializers.Serializer):
    """One participant's share when creating or editing an expense."""

    user_id = serializers.IntegerField(min_value=1)
    amount_owed = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class ExpenseInputSerializer(serializers.Serializer):
    """
    Validate input for creating or replacing an expense.

    Fields:
        description (str): What the money was spent on
        amount (decimal): Total paid
        date (date): When it was paid
        payer_id (int): Who paid
        splits (list): Shares per participant, adding up to ``amount``
        group_id (int): Optional group
        category_id (int): Optional budget category
        discard_repayments (bool): Allow editing an expense that has repayments
    """

    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField()
    payer_id = serializers.IntegerField(min_value=1)
    splits = SplitInputSerializer(many=True, allow_empty=False)
    group_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    category_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    discard_repayments = serializers.BooleanField(required=False, default=False)


class BudgetInputSerializer(serializers.Serializer):
    """Input for creating or updating a budget category."""

    name = serializers.CharField(max_length=100)
    budget_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    icon = serializers.CharField(max_length=16, required=False, allow_blank=True)
    color = serializers.CharField(max_length=64, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class SplitSerializer(serializers.ModelSerializer):
    """A participant's share of an expense and what is still outstanding."""

    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = Split
        fields = ['id', 'user', 'amount_owed', 'original_amount']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Expense with payer and splits."""

    payer = UserPublicSerializer(read_only=True)
    splits = SplitSerializer(many=True, read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'description',
            'amount',
            'date',
            'payer',
            'group',
            'category',
            'splits',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RecentExpenseSerializer(serializers.ModelSerializer):

    class Meta:
        model = Expense
        fields = ['id', 'description', 'amount', 'date']
        read_only_fields = fields


class SummarySerializer(serializers.Serializer):
    total_paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_owed = serializers.DecimalField(max_digits=12, decimal_places=2)


class DashboardSerializer(serializers.Serializer):
    total_friends = serializers.IntegerField()
    total_groups = serializers.IntegerField()
    recent_expenses = RecentExpenseSerializer(many=True)


class FriendBalanceSerializer(serializers.Serializer):
    """Balance against one friend; positive ``net_balance`` means they owe you."""

    friend = UserPublicSerializer()
    owed_to_user = serializers.DecimalField(max_digits=12, decimal_places=2)
    owed_by_user = serializers.DecimalField(max_digits=12, decimal_places=2)
    net_balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class BudgetSerializer(serializers.ModelSerializer):
    """Budget category with spending progress."""

    spent = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    remaining = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()

    class Meta:
        model = BudgetCategory
        fields = [
            'id',
            'name',
            'budget_amount',
            'icon',
            'color',
            'spent',
            'remaining',
            'status',
            'created_at',
        ]
        read_only_fields = fields

    def get_remaining(self, obj):
        return str(obj.budget_amount - obj.spent)

    def get_status(self, obj):
        return budget_status(spent=obj.spent, budget_amount=obj.budget_amount)
