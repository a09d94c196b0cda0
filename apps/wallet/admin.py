from django.contrib import admin
from apps.wallet.models import WalletAccount, WalletTransaction


@admin.register(WalletAccount)
class WalletAccountAdmin(admin.ModelAdmin):
    """Balances are changed through wallet transactions only."""

    list_display = ['user', 'balance', 'currency', 'updated_at']
    search_fields = ['user__email']
    readonly_fields = ['user', 'balance', 'created_at', 'updated_at']
    ordering = ['-updated_at']


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    """Wallet transactions are append-only."""

    list_display = ['id', 'user', 'type', 'amount', 'creditor', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['user__email', 'description']
    readonly_fields = ['user', 'type', 'amount', 'description', 'creditor', 'created_at']
    ordering = ['-created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
