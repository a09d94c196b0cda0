from rest_framework import serializers
from .models import Notification, PaymentReminder
from apps.accounts.serializers import UserPublicSerializer


class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = ['id', 'type', 'title', 'message', 'data', 'is_read', 'created_at']
        read_only_fields = fields


class PaymentReminderSerializer(serializers.ModelSerializer):
    """Reminder with the creditor who sent it."""

    creditor = UserPublicSerializer(read_only=True)

    class Meta:
        model = PaymentReminder
        fields = [
            'id',
            'creditor',
            'amount',
            'due_date',
            'description',
            'paid',
            'paid_at',
            'created_at',
        ]
        read_only_fields = fields


class ReminderCreateSerializer(serializers.Serializer):
    """
    Input for sending a reminder.

    Fields:
        debtor_id (int): User who owes the money
        amount (decimal): Amount owed
        due_date (date): Optional due date
        description (str): Optional note
    """

    debtor_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    due_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class MarkAllReadResponseSerializer(serializers.Serializer):
    updated = serializers.IntegerField()


class SendAllResponseSerializer(serializers.Serializer):
    sent = serializers.IntegerField()
