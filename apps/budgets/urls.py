from django.urls import path
from . import views

app_name = 'budgets'

urlpatterns = [
    # GET /api/budgets/me/ - Current user's budget
    # PUT /api/budgets/me/ - Create or update it
    path('me/', views.my_budget, name='my-budget'),
]
