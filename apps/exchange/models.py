"""Expose the ORM models to Django's app registry."""

from apps.exchange.infrastructure.persistence.models import CurrencyExchangeRate  # noqa: F401
