from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

router = DefaultRouter()
router.register(r'expense-types', views.ExpenseTypeViewSet, basename='expense-type')
router.register(r'expenses', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET/POST             /api/expense-types/        - Expense categories
    # GET/PUT/PATCH/DELETE /api/expense-types/{id}/
    # GET/POST             /api/expenses/             - Expense ledger
    # GET/PUT/PATCH/DELETE /api/expenses/{id}/
    path('', include(router.urls)),
]
