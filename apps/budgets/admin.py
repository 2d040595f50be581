# ==========================================
# apps/budgets/admin.py
# ==========================================

from django.contrib import admin
from .models import Budget


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    """Admin interface for personal budgets."""

    list_display = ['user', 'amount', 'updated_at']
    search_fields = ['user__email', 'user__display_name']
    readonly_fields = ['updated_at']
    ordering = ['-updated_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user')
