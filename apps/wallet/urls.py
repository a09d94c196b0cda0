from django.urls import path
from . import views

app_name = 'wallet'

urlpatterns = [
    path('', views.wallet_detail, name='detail'),
    path('add-funds/', views.add_funds, name='add-funds'),
    path('pay-debt/', views.pay_debt_view, name='pay-debt'),
    path('transactions/', views.transactions, name='transactions'),
]
