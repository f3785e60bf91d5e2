import pytest
from datetime import date
from decimal import Decimal

from apps.exchange.domain.exceptions import NotFoundError, RepositoryError
from apps.exchange.domain.interfaces import (
    BaseExchangeRateProvider,
    ExchangeRateRepositoryInterface,
)
from apps.exchange.domain.models import BRL, USD, ExchangeRate
from apps.transactions.domain.interfaces import PurchaseRepositoryInterface


class InMemoryExchangeRateRepository(ExchangeRateRepositoryInterface):
    """Local rate store double with the same selection rule as the ORM repository."""

    def __init__(self, rates=None, fail_on_save=False):
        self.rates = list(rates or [])
        self.fail_on_save = fail_on_save
        self.save_calls = 0

    def save(self, exchange_rate):
        self.save_calls += 1
        if self.fail_on_save:
            raise RepositoryError("database is locked")
        exchange_rate.validate()
        for existing in self.rates:
            if (
                existing.from_currency == exchange_rate.from_currency
                and existing.to_currency == exchange_rate.to_currency
                and existing.effective_date == exchange_rate.effective_date
            ):
                return False
        self.rates.append(exchange_rate)
        return True

    def get_by_id(self, rate_id):
        return next((r for r in self.rates if r.id == rate_id), None)

    def find_rate_for_conversion(self, from_currency, to_currency, purchase_date):
        matches = [
            r for r in self.rates
            if r.from_currency == from_currency
            and r.to_currency == to_currency
            and r.is_valid_for(purchase_date)
        ]
        if not matches:
            return None
        return max(matches, key=lambda r: (r.effective_date, r.record_date))

    def update(self, exchange_rate):
        for i, existing in enumerate(self.rates):
            if existing.id == exchange_rate.id:
                self.rates[i] = exchange_rate
                return exchange_rate
        raise NotFoundError(f"exchange rate not found with id: {exchange_rate.id}")

    def delete(self, rate_id):
        before = len(self.rates)
        self.rates = [r for r in self.rates if r.id != rate_id]
        if len(self.rates) == before:
            raise NotFoundError(f"exchange rate not found with id: {rate_id}")

    def exists(self, rate_id):
        return any(r.id == rate_id for r in self.rates)


class StubExchangeRateProvider(BaseExchangeRateProvider):
    """External source double that records every call."""

    def __init__(self, rates=None, error=None):
        self.rates = list(rates or [])
        self.error = error
        self.calls = []

    def get_exchange_rate_data(self, source_currency, exchanged_currency, date_from, date_to):
        self.calls.append((source_currency, exchanged_currency, date_from, date_to))
        if self.error is not None:
            raise self.error
        return list(self.rates)


class InMemoryPurchaseRepository(PurchaseRepositoryInterface):

    def __init__(self, purchases=None):
        self.purchases = {p.id: p for p in (purchases or [])}

    def save(self, purchase):
        self.purchases[purchase.id] = purchase
        return purchase

    def get_by_id(self, purchase_id):
        return self.purchases.get(purchase_id)

    def list_paginated(self, page, size):
        ordered = sorted(self.purchases.values(), key=lambda p: (p.date, p.created_at), reverse=True)
        offset = (page - 1) * size
        return ordered[offset:offset + size], len(ordered)

    def count(self):
        return len(self.purchases)

    def exists(self, purchase_id):
        return purchase_id in self.purchases

    def update(self, purchase):
        if purchase.id not in self.purchases:
            raise NotFoundError(f"transaction not found with id: {purchase.id}")
        self.purchases[purchase.id] = purchase
        return purchase

    def delete(self, purchase_id):
        if self.purchases.pop(purchase_id, None) is None:
            raise NotFoundError(f"transaction not found with id: {purchase_id}")


@pytest.fixture
def make_rate():
    """Factory for USD->BRL rates with overridable fields."""
    def _make_rate(effective_date=date(2024, 1, 15), rate="5.20", **overrides):
        fields = {
            "from_currency": USD,
            "to_currency": BRL,
            "rate": Decimal(rate),
            "effective_date": effective_date,
            "record_date": effective_date,
        }
        fields.update(overrides)
        return ExchangeRate(**fields)
    return _make_rate


@pytest.fixture
def rate_repository():
    return InMemoryExchangeRateRepository()


@pytest.fixture
def provider():
    return StubExchangeRateProvider()


@pytest.fixture
def purchase_repository():
    return InMemoryPurchaseRepository()
