from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

# Router for ViewSets
router = DefaultRouter()
router.register(r'budgets', views.BudgetViewSet, basename='budget')
router.register(r'', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET/POST          /api/expenses/                         - List / create expenses
    # GET/PUT/DELETE    /api/expenses/{id}/                    - Expense detail
    # GET               /api/expenses/summary/                 - Total paid / owed
    # GET               /api/expenses/dashboard/               - Dashboard counts
    # GET               /api/expenses/balances/                - Per-friend balances
    # GET               /api/expenses/balances/{friend_id}/    - Balance with one user
    # GET/POST          /api/expenses/budgets/                 - Budget categories
    # GET/PUT/PATCH/DEL /api/expenses/budgets/{id}/            - Budget detail
    path('', include(router.urls)),
]
