import logging
import time
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import requests

from apps.exchange.domain.exceptions import ConfigurationError, ExternalSourceError
from apps.exchange.domain.interfaces import BaseExchangeRateProvider
from apps.exchange.domain.models import CurrencyCode, ExchangeRate, USD

logger = logging.getLogger(__name__)

# Scale of the stored rate column.
RATE_QUANTUM = Decimal("0.000001")

# Treasury filters on "Country-Currency" descriptions instead of ISO codes.
CURRENCY_DESCRIPTIONS = {
    "EUR": "Euro Zone-Euro",
    "GBP": "United Kingdom-Pound",
    "JPY": "Japan-Yen",
    "CAD": "Canada-Dollar",
    "AUD": "Australia-Dollar",
    "CNY": "China-Renminbi",
    "BRL": "Brazil-Real",
    "MXN": "Mexico-Peso",
    "CHF": "Switzerland-Franc",
    "INR": "India-Rupee",
}


class TreasuryProvider(BaseExchangeRateProvider):
    """
    U.S. Treasury "Rates of Exchange" API provider.
    Publishes rates of foreign currencies against USD only.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30,
        page_size: int = 100,
        base_currency: CurrencyCode = USD,
    ):
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.page_size = page_size
        self.base_currency = base_currency

    def get_exchange_rate_data(
        self,
        source_currency: CurrencyCode,
        exchanged_currency: CurrencyCode,
        date_from: date,
        date_to: date,
    ) -> list[ExchangeRate]:
        """
        Fetch the observations for ``exchanged_currency`` in [date_from, date_to].

        Returns:
            Parsed rates, most recent record date first. Records that cannot be
            parsed are skipped.
        """
        if source_currency != self.base_currency:
            raise ConfigurationError(
                f"Treasury API only supports {self.base_currency} as base currency, got {source_currency}",
                from_currency=str(source_currency),
                to_currency=str(exchanged_currency),
            )

        params = self.build_params(exchanged_currency, date_from, date_to)
        logger.info(
            "Calling Treasury API for %s/%s from %s to %s (filter %s)",
            source_currency, exchanged_currency, date_from, date_to, params["filter"],
        )

        started = time.monotonic()
        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            logger.error(
                "Timeout calling Treasury API for %s/%s after %.2fs",
                source_currency, exchanged_currency, time.monotonic() - started,
            )
            raise ExternalSourceError(
                f"Treasury API timed out after {self.timeout_seconds}s",
                to_currency=str(exchanged_currency),
            ) from e
        except requests.exceptions.HTTPError as e:
            logger.error("HTTP error from Treasury API: %s", e)
            raise ExternalSourceError(
                f"Treasury API returned status {e.response.status_code if e.response is not None else 'unknown'}",
                to_currency=str(exchanged_currency),
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error("Failed to fetch from Treasury API: %s", e)
            raise ExternalSourceError(
                f"failed to fetch from Treasury API: {e}",
                to_currency=str(exchanged_currency),
            ) from e
        except ValueError as e:
            logger.error("Invalid JSON from Treasury API: %s", e)
            raise ExternalSourceError(
                f"failed to parse Treasury API response: {e}",
                to_currency=str(exchanged_currency),
            ) from e

        logger.info(
            "Treasury API call successful in %.2fs", time.monotonic() - started,
        )

        records = data.get("data") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise ExternalSourceError(
                "failed to parse Treasury API response: missing 'data' list",
                to_currency=str(exchanged_currency),
            )

        rates = []
        for record in records:
            rate = self.parse_record(record, source_currency, exchanged_currency)
            if rate is not None:
                rates.append(rate)

        rates.sort(key=lambda r: r.effective_date, reverse=True)
        return rates

    def build_params(self, currency: CurrencyCode, date_from: date, date_to: date) -> dict:
        description = self.currency_description(currency)
        return {
            "fields": "country_currency_desc,exchange_rate,record_date",
            "filter": (
                f"country_currency_desc:eq:{description},"
                f"record_date:gte:{date_from.isoformat()},"
                f"record_date:lte:{date_to.isoformat()}"
            ),
            "sort": "-record_date",
            "page[size]": self.page_size,
        }

    @staticmethod
    def currency_description(currency: CurrencyCode) -> str:
        return CURRENCY_DESCRIPTIONS.get(currency.value, currency.value)

    @staticmethod
    def parse_record(
        record: dict,
        source_currency: CurrencyCode,
        exchanged_currency: CurrencyCode,
    ) -> ExchangeRate | None:
        # Treasury only publishes record_date; it serves as the effective date too.
        try:
            rate_value = Decimal(str(record["exchange_rate"]))
            record_date = date.fromisoformat(record["record_date"])
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.debug("Skipping malformed Treasury record %r: %s", record, e)
            return None
        if not rate_value.is_finite():
            logger.debug("Skipping non-finite Treasury rate %r", record)
            return None
        try:
            rate_value = rate_value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            logger.debug("Skipping out-of-range Treasury rate %r", record)
            return None

        return ExchangeRate(
            from_currency=source_currency,
            to_currency=exchanged_currency,
            rate=rate_value,
            effective_date=record_date,
            record_date=record_date,
        )
