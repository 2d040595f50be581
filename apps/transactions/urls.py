from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'transactions'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # Transaction ViewSet routes
    # GET    /api/transactions/?group=    - List entries of a scope
    # GET    /api/transactions/{id}/      - Get entry details
    # DELETE /api/transactions/{id}/      - Delete entry (creator)

    # Creation endpoints
    # POST   /api/transactions/expenses/    - Record expense (optionally split)
    # POST   /api/transactions/loans/       - Record loan
    # POST   /api/transactions/settlements/ - Record settlement

    # Include router URLs
    path('', include(router.urls)),
]
