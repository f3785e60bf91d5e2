"""
Repository pattern implementation.
Abstracts database access to decouple domain logic from persistence.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from django.db import DatabaseError

from apps.exchange.domain.exceptions import NotFoundError, RepositoryError
from apps.exchange.domain.interfaces import ExchangeRateRepositoryInterface
from apps.exchange.domain.models import CurrencyCode, ExchangeRate, validity_window_start
from apps.exchange.infrastructure.persistence.models import CurrencyExchangeRate


def to_domain(row: CurrencyExchangeRate) -> ExchangeRate:
    return ExchangeRate(
        id=row.id,
        from_currency=CurrencyCode(row.from_currency),
        to_currency=CurrencyCode(row.to_currency),
        rate=row.rate,
        effective_date=row.effective_date,
        record_date=row.record_date,
        created_at=row.created_at,
    )


class CurrencyExchangeRateRepository(ExchangeRateRepositoryInterface):
    """Repository for CurrencyExchangeRate aggregate."""

    def save(self, exchange_rate: ExchangeRate) -> bool:
        """
        Store the rate unless the pair already has one for that effective date.

        Returns:
            True when a new row was inserted, False when an equivalent row existed.
        """
        exchange_rate.validate()
        try:
            _, created = CurrencyExchangeRate.objects.get_or_create(
                from_currency=exchange_rate.from_currency.value,
                to_currency=exchange_rate.to_currency.value,
                effective_date=exchange_rate.effective_date,
                defaults={
                    "id": exchange_rate.id,
                    "rate": exchange_rate.rate,
                    "record_date": exchange_rate.record_date or exchange_rate.effective_date,
                },
            )
        except DatabaseError as e:
            raise RepositoryError(
                f"failed to save exchange rate {exchange_rate.from_currency}/"
                f"{exchange_rate.to_currency} effective {exchange_rate.effective_date}: {e}",
                rate_id=str(exchange_rate.id),
            ) from e
        return created

    def get_by_id(self, rate_id: UUID) -> Optional[ExchangeRate]:
        """Get exchange rate by id, None when absent."""
        try:
            row = CurrencyExchangeRate.objects.filter(id=rate_id).first()
        except DatabaseError as e:
            raise RepositoryError(f"failed to load exchange rate {rate_id}: {e}", rate_id=str(rate_id)) from e
        return to_domain(row) if row else None

    def find_rate_for_conversion(
        self,
        from_currency: CurrencyCode,
        to_currency: CurrencyCode,
        purchase_date: date,
    ) -> Optional[ExchangeRate]:
        """Most recent rate with effective date in [purchase_date - 6 months, purchase_date]."""
        try:
            row = (
                CurrencyExchangeRate.objects
                .filter(
                    from_currency=from_currency.value,
                    to_currency=to_currency.value,
                    effective_date__gte=validity_window_start(purchase_date),
                    effective_date__lte=purchase_date,
                )
                .order_by("-effective_date", "-record_date", "-created_at")
                .first()
            )
        except DatabaseError as e:
            raise RepositoryError(
                f"error searching local exchange rates for {from_currency}/{to_currency} "
                f"on {purchase_date}: {e}",
                from_currency=str(from_currency),
                to_currency=str(to_currency),
            ) from e
        return to_domain(row) if row else None

    def update(self, exchange_rate: ExchangeRate) -> ExchangeRate:
        """Correct an erroneous entry in place."""
        exchange_rate.validate()
        try:
            row = CurrencyExchangeRate.objects.filter(id=exchange_rate.id).first()
            if row is None:
                raise NotFoundError(
                    f"exchange rate not found with id: {exchange_rate.id}",
                    rate_id=str(exchange_rate.id),
                )
            row.from_currency = exchange_rate.from_currency.value
            row.to_currency = exchange_rate.to_currency.value
            row.rate = exchange_rate.rate
            row.effective_date = exchange_rate.effective_date
            row.record_date = exchange_rate.record_date or exchange_rate.effective_date
            row.save()
        except DatabaseError as e:
            raise RepositoryError(
                f"failed to update exchange rate {exchange_rate.id}: {e}",
                rate_id=str(exchange_rate.id),
            ) from e
        return to_domain(row)

    def delete(self, rate_id: UUID) -> None:
        try:
            deleted, _ = CurrencyExchangeRate.objects.filter(id=rate_id).delete()
        except DatabaseError as e:
            raise RepositoryError(f"failed to delete exchange rate {rate_id}: {e}", rate_id=str(rate_id)) from e
        if not deleted:
            raise NotFoundError(f"exchange rate not found with id: {rate_id}", rate_id=str(rate_id))

    def exists(self, rate_id: UUID) -> bool:
        try:
            return CurrencyExchangeRate.objects.filter(id=rate_id).exists()
        except DatabaseError as e:
            raise RepositoryError(f"failed to check exchange rate {rate_id}: {e}", rate_id=str(rate_id)) from e
