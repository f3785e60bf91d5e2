"""
Application use cases for purchase transactions.

Each use case is built per request with its collaborators injected and
holds no state between calls.
"""

import logging
from uuid import UUID

from apps.exchange.domain.exceptions import (
    InternalConsistencyError,
    InvalidConversionError,
    NotFoundError,
    ValidationError,
)
from apps.exchange.domain.models import CurrencyCode, ExchangeRate
from apps.exchange.domain.services import ExchangeRateService
from apps.transactions.application.dto import (
    ConversionResultDTO,
    ConvertPurchaseRequestDTO,
    CreatePurchaseRequestDTO,
    ListPurchasesRequestDTO,
    PurchaseDTO,
    PurchasePageDTO,
)
from apps.transactions.domain.interfaces import PurchaseRepositoryInterface
from apps.transactions.domain.models import ConversionResult, Purchase, PurchasePage

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def parse_purchase_id(raw) -> UUID:
    """
    Raises:
        ValidationError: if raw is missing, malformed or the nil UUID.
    """
    if raw is None or raw == "":
        raise ValidationError("transaction ID cannot be empty", field="id")
    if isinstance(raw, UUID):
        purchase_id = raw
    else:
        try:
            purchase_id = UUID(str(raw))
        except ValueError as e:
            raise ValidationError(
                f"invalid transaction ID '{raw}': must be a valid UUID", field="id"
            ) from e
    if purchase_id.int == 0:
        raise ValidationError("transaction ID cannot be empty", field="id")
    return purchase_id


class CreatePurchaseUseCase:

    def __init__(self, purchase_repository: PurchaseRepositoryInterface):
        self._purchase_repository = purchase_repository

    def execute(self, request: CreatePurchaseRequestDTO) -> PurchaseDTO:
        if request is None:
            raise ValidationError("request cannot be nil")

        purchase = Purchase.create(request.description, request.date, request.amount)
        purchase.validate()

        saved = self._purchase_repository.save(purchase)
        logger.info("Created transaction %s for %s", saved.id, saved.amount)
        return PurchaseDTO.from_entity(saved)


class GetPurchaseUseCase:

    def __init__(self, purchase_repository: PurchaseRepositoryInterface):
        self._purchase_repository = purchase_repository

    def execute(self, purchase_id) -> PurchaseDTO:
        purchase_id = parse_purchase_id(purchase_id)
        purchase = self._purchase_repository.get_by_id(purchase_id)
        if purchase is None:
            raise NotFoundError(f"transaction not found with id: {purchase_id}", purchase_id=str(purchase_id))
        return PurchaseDTO.from_entity(purchase)


class ListPurchasesUseCase:

    def __init__(self, purchase_repository: PurchaseRepositoryInterface):
        self._purchase_repository = purchase_repository

    def execute(self, request: ListPurchasesRequestDTO) -> PurchasePageDTO:
        page, size = self._validate_and_set_defaults(request)
        items, total = self._purchase_repository.list_paginated(page, size)
        return PurchasePageDTO.from_page(PurchasePage(items=items, page=page, size=size, total=total))

    @staticmethod
    def _validate_and_set_defaults(request: ListPurchasesRequestDTO) -> tuple[int, int]:
        if request is None:
            raise ValidationError("request cannot be nil")

        page = request.page or DEFAULT_PAGE
        size = request.size or DEFAULT_PAGE_SIZE

        if page < 1:
            raise ValidationError("page must be at least 1", field="page")
        if size < 1:
            raise ValidationError("size must be at least 1", field="size")
        if size > MAX_PAGE_SIZE:
            raise ValidationError(f"size cannot exceed {MAX_PAGE_SIZE}", field="size")
        return page, size


class ConvertPurchaseUseCase:
    """
    Expresses a stored purchase in another currency.

    Steps, each short-circuiting on failure:
    1. Validate the purchase id and target currency
    2. Load the purchase
    3. Reject conversion into the base currency
    4. Resolve the rate (local store, then external provider)
    5. Re-check the validity window and apply the rate
    """

    def __init__(
        self,
        purchase_repository: PurchaseRepositoryInterface,
        exchange_rate_service: ExchangeRateService,
        base_currency: CurrencyCode,
    ):
        self._purchase_repository = purchase_repository
        self._exchange_rate_service = exchange_rate_service
        self._base_currency = base_currency

    def execute(self, request: ConvertPurchaseRequestDTO) -> ConversionResultDTO:
        result = self.convert(request)
        return ConversionResultDTO.from_result(result)

    def convert(self, request: ConvertPurchaseRequestDTO) -> ConversionResult:
        if request is None:
            raise ValidationError("request cannot be nil")

        purchase_id = parse_purchase_id(request.purchase_id)
        target_currency = CurrencyCode.parse(request.target_currency)

        purchase = self._get_purchase(purchase_id)

        if target_currency == self._base_currency:
            raise InvalidConversionError(
                f"cannot convert {self._base_currency} transaction to {target_currency}",
                purchase_id=str(purchase_id),
                target_currency=str(target_currency),
            )

        rate = self._exchange_rate_service.resolve(self._base_currency, target_currency, purchase.date)
        return self._build_result(purchase, target_currency, rate)

    def _get_purchase(self, purchase_id: UUID) -> Purchase:
        purchase = self._purchase_repository.get_by_id(purchase_id)
        if purchase is None:
            raise NotFoundError(f"transaction not found with id: {purchase_id}", purchase_id=str(purchase_id))
        return purchase

    @staticmethod
    def _build_result(purchase: Purchase, target_currency: CurrencyCode, rate: ExchangeRate) -> ConversionResult:
        if not rate.is_valid_for(purchase.date):
            raise InternalConsistencyError(
                f"resolved rate {rate.id} effective {rate.effective_date} is outside the "
                f"validity window of transaction {purchase.id} dated {purchase.date}",
                purchase_id=str(purchase.id),
                rate_id=str(rate.id),
            )

        converted = rate.convert(purchase.amount)
        logger.info(
            "Converted transaction %s: %s %s -> %s %s at %s (effective %s)",
            purchase.id, purchase.amount, rate.from_currency,
            converted, target_currency, rate.rate, rate.effective_date,
        )
        return ConversionResult(
            purchase=purchase,
            target_currency=target_currency,
            exchange_rate=rate.rate,
            converted_amount=converted,
            effective_date=rate.effective_date,
        )
