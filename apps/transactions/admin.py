from django.contrib import admin

from apps.transactions.infrastructure.persistence.models import Purchase


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """Admin interface for Purchase model."""

    list_display = ('description', 'date', 'get_amount', 'created_at')
    list_filter = ('date',)
    search_fields = ('description',)
    readonly_fields = ('id', 'created_at', 'updated_at')
    date_hierarchy = 'date'
    ordering = ('-date', '-created_at')

    fieldsets = (
        ('Purchase', {
            'fields': ('description', 'date', 'amount_minor_units')
        }),
        ('Metadata', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Amount', ordering='amount_minor_units')
    def get_amount(self, obj):
        return f"{obj.amount_minor_units / 100:.2f}"
