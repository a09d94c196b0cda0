from django.contrib import admin
from apps.notifications.models import Notification, PaymentReminder


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'user', 'type', 'is_read', 'created_at']
    list_filter = ['type', 'is_read', 'created_at']
    search_fields = ['title', 'user__email']
    raw_id_fields = ['user']
    ordering = ['-created_at']


@admin.register(PaymentReminder)
class PaymentReminderAdmin(admin.ModelAdmin):
    list_display = ['debtor', 'creditor', 'amount', 'due_date', 'paid', 'created_at']
    list_filter = ['paid', 'due_date']
    search_fields = ['debtor__email', 'creditor__email', 'description']
    raw_id_fields = ['debtor', 'creditor']
    readonly_fields = ['paid_at', 'created_at']
    ordering = ['paid', '-created_at']
