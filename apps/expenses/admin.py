from django.contrib import admin
from apps.expenses.models import BudgetCategory, Expense, Split


class SplitInline(admin.TabularInline):
    """Inline admin for expense splits."""
    model = Split
    extra = 0
    fields = ['user', 'original_amount', 'amount_owed']
    readonly_fields = ['original_amount', 'amount_owed']
    raw_id_fields = ['user']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin interface for Expenses."""

    list_display = ['description', 'amount', 'payer', 'group', 'date', 'outstanding']
    list_filter = ['date', 'created_at']
    search_fields = ['description', 'payer__email']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['payer', 'created_by', 'group', 'category']
    inlines = [SplitInline]
    date_hierarchy = 'date'
    ordering = ['-date', '-id']

    def outstanding(self, obj):
        """Sum still owed across the splits."""
        return sum(split.amount_owed for split in obj.splits.all())
    outstanding.short_description = 'Outstanding'


@admin.register(BudgetCategory)
class BudgetCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'budget_amount', 'created_at']
    search_fields = ['name', 'user__email']
    raw_id_fields = ['user']
