# ==========================================
# apps/transactions/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Transaction, TransactionSplit, TransactionKind


class TransactionSplitInline(admin.TabularInline):
    """Inline admin for split rows within an expense."""
    model = TransactionSplit
    extra = 0
    fields = ['user', 'amount', 'created_at']
    readonly_fields = ['user', 'amount', 'created_at']

    def has_add_permission(self, request, obj=None):
        """Splits are created by the service together with the expense."""
        return False


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Admin interface for ledger entries.

    Entries are immutable, so every field is read-only; deletion stays
    available for cleanup.
    """

    list_display = [
        'title',
        'kind_badge',
        'amount',
        'paid_by',
        'get_group_name',
        'created_by',
        'created_at',
    ]
    list_filter = ['kind', 'created_at']
    search_fields = [
        'title',
        'note',
        'category',
        'paid_by__email',
        'paid_by__display_name',
        'group__name',
    ]
    readonly_fields = [
        'title', 'amount', 'kind', 'paid_by', 'paid_to', 'loaned_to',
        'split_between', 'note', 'category', 'tag', 'group',
        'created_by', 'created_at',
    ]
    inlines = [TransactionSplitInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def kind_badge(self, obj):
        """Display transaction kind as colored badge."""
        colors = {
            TransactionKind.EXPENSE: ('#E5C49A', '#2C1810'),
            TransactionKind.LOAN: ('#A47449', 'white'),
            TransactionKind.SETTLEMENT: ('#6B8E5E', 'white'),
        }
        bg, fg = colors.get(obj.kind, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_kind_display()
        )
    kind_badge.short_description = 'Kind'

    def get_group_name(self, obj):
        return obj.group.name if obj.group_id else 'Personal'
    get_group_name.short_description = 'Group'

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('paid_by', 'group', 'created_by')
