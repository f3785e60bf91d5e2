"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from apps.transactions.domain.models import ConversionResult, Purchase, PurchasePage


@dataclass
class CreatePurchaseRequestDTO:
    """Request DTO for recording a purchase."""
    description: str
    date: date
    amount: Decimal


@dataclass
class ListPurchasesRequestDTO:
    """Request DTO for a page of purchases. Zero means "use the default"."""
    page: int = 0
    size: int = 0


@dataclass
class ConvertPurchaseRequestDTO:
    """Request DTO for currency conversion of a stored purchase."""
    purchase_id: UUID | str | None
    target_currency: str | None


@dataclass
class PurchaseDTO:
    """Purchase as exposed to callers, amount in major units."""
    id: UUID
    description: str
    date: date
    amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, purchase: Purchase) -> "PurchaseDTO":
        return cls(
            id=purchase.id,
            description=purchase.description,
            date=purchase.date,
            amount=purchase.amount.to_major_units(),
            created_at=purchase.created_at,
            updated_at=purchase.updated_at,
        )


@dataclass
class PurchasePageDTO:
    """Result DTO for a page of purchases."""
    data: List[PurchaseDTO]
    page: int
    size: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: PurchasePage) -> "PurchasePageDTO":
        return cls(
            data=[PurchaseDTO.from_entity(p) for p in page.items],
            page=page.page,
            size=page.size,
            total=page.total,
            total_pages=page.total_pages,
        )


@dataclass
class ConversionResultDTO:
    """Result DTO for currency conversion."""
    transaction: PurchaseDTO
    target_currency: str
    exchange_rate: Decimal
    converted_amount: Decimal
    effective_date: date

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionResultDTO":
        return cls(
            transaction=PurchaseDTO.from_entity(result.purchase),
            target_currency=str(result.target_currency),
            exchange_rate=result.exchange_rate,
            converted_amount=result.converted_amount.to_major_units(),
            effective_date=result.effective_date,
        )
