"""
Wiring of use cases with their collaborators.

Settings are read here, once per request, and injected; nothing below the
application layer touches django.conf.settings.
"""

from django.conf import settings

from apps.exchange.domain.models import CurrencyCode
from apps.exchange.domain.services import ExchangeRateService
from apps.exchange.infrastructure.persistence.repositories import CurrencyExchangeRateRepository
from apps.exchange.infrastructure.providers.registry import get_provider_instance
from apps.transactions.application.use_cases import (
    ConvertPurchaseUseCase,
    CreatePurchaseUseCase,
    GetPurchaseUseCase,
    ListPurchasesUseCase,
)
from apps.transactions.infrastructure.persistence.repositories import PurchaseRepository


def get_base_currency() -> CurrencyCode:
    return CurrencyCode.parse(settings.BASE_CURRENCY)


def build_exchange_rate_service(base_currency: CurrencyCode) -> ExchangeRateService:
    return ExchangeRateService(
        repository=CurrencyExchangeRateRepository(),
        provider=get_provider_instance(settings.EXCHANGE_RATE_PROVIDER, base_currency),
    )


def build_create_purchase_use_case() -> CreatePurchaseUseCase:
    return CreatePurchaseUseCase(PurchaseRepository())


def build_get_purchase_use_case() -> GetPurchaseUseCase:
    return GetPurchaseUseCase(PurchaseRepository())


def build_list_purchases_use_case() -> ListPurchasesUseCase:
    return ListPurchasesUseCase(PurchaseRepository())


def build_convert_purchase_use_case() -> ConvertPurchaseUseCase:
    base_currency = get_base_currency()
    return ConvertPurchaseUseCase(
        purchase_repository=PurchaseRepository(),
        exchange_rate_service=build_exchange_rate_service(base_currency),
        base_currency=base_currency,
    )
