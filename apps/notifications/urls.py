from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    # Notifications
    path('', views.notifications, name='list'),
    path('<int:notification_id>/read/', views.mark_read, name='mark-read'),
    path('read-all/', views.mark_all_read, name='mark-all-read'),

    # Payment reminders
    path('reminders/', views.reminders, name='reminders'),
    path('reminders/send-all/', views.send_all, name='reminders-send-all'),
    path('reminders/<int:reminder_id>/pay/', views.pay, name='reminder-pay'),
]
