"""
Mock provider for development without network access.
Generates deterministic, realistic quarter-end observations.
"""

import random
from datetime import date
from decimal import Decimal

from apps.exchange.domain.exceptions import ConfigurationError
from apps.exchange.domain.interfaces import BaseExchangeRateProvider
from apps.exchange.domain.models import CurrencyCode, ExchangeRate, USD


def quarter_ends(date_from: date, date_to: date) -> list[date]:
    """Quarter-end dates (Mar 31, Jun 30, Sep 30, Dec 31) in [date_from, date_to], newest first."""
    ends = []
    for year in range(date_to.year, date_from.year - 1, -1):
        for month, day in ((12, 31), (9, 30), (6, 30), (3, 31)):
            candidate = date(year, month, day)
            if date_from <= candidate <= date_to:
                ends.append(candidate)
    return ends


class MockProvider(BaseExchangeRateProvider):
    """
    Mock provider that publishes one observation per quarter end, like Treasury.
    Useful for:
    - Running the API without external calls
    - Development without network access
    """

    # Reference rates: units of currency per 1 USD (approximate real-world values)
    BASE_RATES = {
        "EUR": Decimal("0.92"),
        "GBP": Decimal("0.79"),
        "JPY": Decimal("148.5"),
        "CAD": Decimal("1.35"),
        "AUD": Decimal("1.52"),
        "CNY": Decimal("7.19"),
        "BRL": Decimal("5.20"),
        "MXN": Decimal("17.05"),
        "CHF": Decimal("0.88"),
        "INR": Decimal("83.2"),
    }

    def __init__(self, base_currency: CurrencyCode = USD):
        self.base_currency = base_currency

    def get_exchange_rate_data(
        self,
        source_currency: CurrencyCode,
        exchanged_currency: CurrencyCode,
        date_from: date,
        date_to: date,
    ) -> list[ExchangeRate]:
        if source_currency != self.base_currency:
            raise ConfigurationError(
                f"MockProvider only supports {self.base_currency} as base currency, got {source_currency}",
                from_currency=str(source_currency),
            )

        base_rate = self.BASE_RATES.get(exchanged_currency.value)
        if base_rate is None:
            return []

        rates = []
        for observed_on in quarter_ends(date_from, date_to):
            # Seed with pair and date so the same query always yields the same rate (±2%)
            rng = random.Random(f"{source_currency}{exchanged_currency}{observed_on}")
            variation = Decimal(str(rng.uniform(0.98, 1.02)))
            rates.append(
                ExchangeRate(
                    from_currency=source_currency,
                    to_currency=exchanged_currency,
                    rate=(base_rate * variation).quantize(Decimal("0.001")),
                    effective_date=observed_on,
                    record_date=observed_on,
                )
            )
        return rates
