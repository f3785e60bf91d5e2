"""
Provider Registry - Maps provider names to adapter classes.
This is the glue between the EXCHANGE_RATE_PROVIDER setting and the actual implementation.
"""

from django.conf import settings

from apps.exchange.domain.exceptions import ConfigurationError
from apps.exchange.domain.interfaces import BaseExchangeRateProvider
from apps.exchange.domain.models import CurrencyCode
from apps.exchange.infrastructure.providers.mock import MockProvider
from apps.exchange.infrastructure.providers.treasury import TreasuryProvider


class ProviderName:
    """
    Available providers.
    To add a new provider:
    1. Add a name here
    2. Implement the BaseExchangeRateProvider interface
    3. Register in PROVIDER_REGISTRY and in build_provider_kwargs
    """

    TREASURY = "treasury"
    MOCK = "mock"


PROVIDER_REGISTRY: dict[str, type[BaseExchangeRateProvider]] = {
    ProviderName.TREASURY: TreasuryProvider,
    ProviderName.MOCK: MockProvider,
}


def build_provider_kwargs(provider_name: str, base_currency: CurrencyCode) -> dict:
    if provider_name == ProviderName.TREASURY:
        return {
            "base_url": settings.TREASURY_URL,
            "timeout_seconds": settings.TREASURY_TIMEOUT_SECONDS,
            "page_size": settings.TREASURY_PAGE_SIZE,
            "base_currency": base_currency,
        }
    return {"base_currency": base_currency}


def get_provider_instance(provider_name: str, base_currency: CurrencyCode) -> BaseExchangeRateProvider:
    """
    Get an instance of a provider by its name.

    Raises:
        ConfigurationError: if the name is not registered
    """
    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if provider_class is None:
        raise ConfigurationError(
            f"Provider '{provider_name}' not found in registry. Allowed: {sorted(PROVIDER_REGISTRY)}",
            provider=provider_name,
        )

    return provider_class(**build_provider_kwargs(provider_name, base_currency))
