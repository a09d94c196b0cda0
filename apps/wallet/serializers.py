from rest_framework import serializers
from .models import WalletAccount, WalletTransaction
from apps.accounts.serializers import UserPublicSerializer


class WalletSerializer(serializers.ModelSerializer):
    """Current wallet balance."""

    class Meta:
        model = WalletAccount
        fields = ['balance', 'currency', 'updated_at']
        read_only_fields = fields


class WalletTransactionSerializer(serializers.ModelSerializer):
    """One entry of the wallet history."""

    creditor = UserPublicSerializer(read_only=True)

    class Meta:
        model = WalletTransaction
        fields = ['id', 'type', 'amount', 'description', 'creditor', 'created_at']
        read_only_fields = fields


class AddFundsSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class PayDebtSerializer(serializers.Serializer):
    """
    Input for paying from the wallet.

    Fields:
        amount (decimal): Amount to pay
        creditor_id (int): User being repaid; omit for a plain payment
        description (str): Optional note stored on the transaction
    """

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    creditor_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class SplitUpdateSerializer(serializers.Serializer):
    split_id = serializers.IntegerField()
    new_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class BalanceResponseSerializer(serializers.Serializer):
    new_balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class PayDebtResponseSerializer(serializers.Serializer):
    new_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    splits_updated = SplitUpdateSerializer(many=True)
