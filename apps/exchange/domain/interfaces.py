from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from apps.exchange.domain.models import CurrencyCode, ExchangeRate


class BaseExchangeRateProvider(ABC):
    """External, authoritative source of dated exchange rate observations."""

    @abstractmethod
    def get_exchange_rate_data(
        self,
        source_currency: CurrencyCode,
        exchanged_currency: CurrencyCode,
        date_from: date,
        date_to: date,
    ) -> list[ExchangeRate]:
        """
        Return the observations for the pair within [date_from, date_to].

        Raises:
            ConfigurationError: the source does not publish rates for source_currency.
            ExternalSourceError: timeout, transport failure or bad response.
        """


class ExchangeRateRepositoryInterface(ABC):
    """Local rate store."""

    @abstractmethod
    def save(self, exchange_rate: ExchangeRate) -> bool:
        """Insert the rate unless one exists for the same pair and effective date. True when inserted."""

    @abstractmethod
    def get_by_id(self, rate_id: UUID) -> ExchangeRate | None:
        pass

    @abstractmethod
    def find_rate_for_conversion(
        self,
        from_currency: CurrencyCode,
        to_currency: CurrencyCode,
        purchase_date: date,
    ) -> ExchangeRate | None:
        """Most recent rate whose effective date lies in the validity window, or None."""

    @abstractmethod
    def update(self, exchange_rate: ExchangeRate) -> ExchangeRate:
        pass

    @abstractmethod
    def delete(self, rate_id: UUID) -> None:
        pass

    @abstractmethod
    def exists(self, rate_id: UUID) -> bool:
        pass
