from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'receipts'

router = DefaultRouter()
router.register(r'receipt-books', views.ReceiptBookViewSet, basename='receipt-book')
router.register(r'receipts', views.ReceiptViewSet, basename='receipt')

urlpatterns = [
    # Receipt books
    # GET    /api/receipt-books/               - List books (collectors: own)
    # POST   /api/receipt-books/               - Create book (manager/admin)
    # GET    /api/receipt-books/{id}/          - Get book
    # PUT    /api/receipt-books/{id}/          - Edit book (manager/admin)
    # DELETE /api/receipt-books/{id}/          - Delete unused book (manager/admin)
    # POST   /api/receipt-books/{id}/assign/   - Assign to a collector
    # POST   /api/receipt-books/{id}/close/    - Close for issuance

    # Receipts
    # GET    /api/receipts/                    - List receipts (role-scoped)
    # POST   /api/receipts/                    - Issue receipt
    # GET    /api/receipts/{id}/               - Get receipt
    # PUT    /api/receipts/{id}/               - Edit receipt (manager/admin)
    # GET    /api/receipts/next-number/?book=  - Suggested next number
    path('', include(router.urls)),
]
