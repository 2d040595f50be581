from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # group_id is a group UUID or 'personal'
    path('groups/<str:group_id>/balance/', views.group_balance, name='group-balance'),
    path('groups/<str:group_id>/monthly-stats/', views.group_monthly_stats, name='group-monthly-stats'),
    path('groups/<str:group_id>/budget/', views.group_budget_progress, name='group-budget'),
    path('groups/<str:group_id>/dashboard/', views.group_dashboard, name='group-dashboard'),
]
