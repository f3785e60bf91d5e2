"""
Domain services - Core business logic.
Implements the local-then-remote lookup for exchange rates.
"""

import logging
from datetime import date
from typing import Iterable

from apps.exchange.domain.exceptions import (
    DomainError,
    NoSuitableRateError,
    ValidationError,
)
from apps.exchange.domain.interfaces import (
    BaseExchangeRateProvider,
    ExchangeRateRepositoryInterface,
)
from apps.exchange.domain.models import CurrencyCode, ExchangeRate, validity_window_start

logger = logging.getLogger(__name__)


def select_most_recent_valid(
    candidates: Iterable[ExchangeRate],
    purchase_date: date,
) -> ExchangeRate | None:
    """
    Pick the latest observation usable for ``purchase_date``.

    Candidates that fail entity validation or fall outside the validity
    window are dropped. Ties on effective date go to the latest record date.
    """
    valid = []
    for candidate in candidates:
        try:
            candidate.validate()
        except ValidationError as e:
            logger.debug("Discarding invalid rate candidate %s: %s", candidate.id, e)
            continue
        if candidate.is_valid_for(purchase_date):
            valid.append(candidate)

    if not valid:
        return None

    return max(valid, key=lambda r: (r.effective_date, r.record_date or r.effective_date))


class ExchangeRateService:
    """
    Domain service that resolves the exchange rate to use for a purchase.

    Lookup strategy:
    1. Most recent valid rate in the local store
    2. If none, ask the external provider for the 6-month window
    3. Re-check the validity window on whatever the provider returned
    4. Cache the chosen rate locally (best-effort)

    Two concurrent resolutions of the same uncached pair may both reach the
    provider. The store's unique (from, to, effective_date) constraint turns
    the second cache write into a no-op.
    """

    def __init__(
        self,
        repository: ExchangeRateRepositoryInterface,
        provider: BaseExchangeRateProvider,
    ):
        self._repository = repository
        self._provider = provider

    def resolve(
        self,
        source_currency: CurrencyCode,
        target_currency: CurrencyCode,
        purchase_date: date,
    ) -> ExchangeRate:
        """
        Get the exchange rate for converting a purchase dated ``purchase_date``.

        Raises:
            NoSuitableRateError: no rate within the window in either tier
            ExternalSourceError: the provider call failed
            ConfigurationError: the provider does not support source_currency
            RepositoryError: the local store could not be read
        """
        local_rate = self._repository.find_rate_for_conversion(
            source_currency, target_currency, purchase_date
        )
        if local_rate is not None and local_rate.is_valid_for(purchase_date):
            logger.info(
                "Rate found in local store: %s/%s %s effective %s",
                source_currency, target_currency, local_rate.rate, local_rate.effective_date,
            )
            return local_rate

        logger.info(
            "No local rate for %s/%s on %s, querying provider %s",
            source_currency, target_currency, purchase_date, self._provider.__class__.__name__,
        )
        candidates = self._provider.get_exchange_rate_data(
            source_currency,
            target_currency,
            validity_window_start(purchase_date),
            purchase_date,
        )

        rate = select_most_recent_valid(candidates, purchase_date)
        if rate is None:
            logger.warning(
                "No suitable rate for %s/%s on %s among %d provider candidates",
                source_currency, target_currency, purchase_date, len(candidates),
            )
            raise NoSuitableRateError(str(source_currency), str(target_currency), purchase_date)

        self._cache(rate)
        return rate

    def _cache(self, rate: ExchangeRate) -> None:
        # The caller already holds a usable rate; a failed write only costs a future provider call.
        try:
            created = self._repository.save(rate)
        except DomainError as e:
            logger.warning(
                "Failed to cache exchange rate %s/%s effective %s: %s",
                rate.from_currency, rate.to_currency, rate.effective_date, e,
                exc_info=True,
            )
            return

        if created:
            logger.info(
                "Cached rate %s/%s %s effective %s",
                rate.from_currency, rate.to_currency, rate.rate, rate.effective_date,
            )
