"""
Django Admin configuration for Exchange app.
Cached rates can be inspected and erroneous entries corrected here.
"""

from django.contrib import admin

from apps.exchange.infrastructure.persistence.models import CurrencyExchangeRate


@admin.register(CurrencyExchangeRate)
class CurrencyExchangeRateAdmin(admin.ModelAdmin):
    """Admin interface for CurrencyExchangeRate model."""

    list_display = (
        'get_currency_pair',
        'rate',
        'effective_date',
        'record_date',
        'created_at'
    )
    list_filter = (
        'effective_date',
        'from_currency',
        'to_currency',
    )
    search_fields = (
        'from_currency',
        'to_currency',
    )
    readonly_fields = ('id', 'created_at', 'updated_at')
    date_hierarchy = 'effective_date'
    ordering = ('-effective_date', 'to_currency')

    fieldsets = (
        ('Exchange Rate', {
            'fields': (
                'from_currency',
                'to_currency',
                'rate',
                'effective_date',
                'record_date',
            )
        }),
        ('Metadata', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Currency Pair', ordering='to_currency')
    def get_currency_pair(self, obj):
        """Display currency pair in format SOURCE/TARGET."""
        return f"{obj.from_currency}/{obj.to_currency}"
