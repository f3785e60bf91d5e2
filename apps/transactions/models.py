"""Expose the ORM models to Django's app registry."""

from apps.transactions.infrastructure.persistence.models import Purchase  # noqa: F401
