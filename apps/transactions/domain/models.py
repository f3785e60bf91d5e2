"""
Pure domain entities for purchase transactions.
No dependency on Django or the ORM.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4, UUID

from apps.exchange.domain.exceptions import ValidationError
from apps.exchange.domain.models import CurrencyCode, Money, validity_window_start

DESCRIPTION_MAX_LENGTH = 50
# Upper bound of a signed 64-bit integer column.
MAX_AMOUNT_MINOR_UNITS = 2 ** 63 - 1


def calculate_total_pages(total: int, size: int) -> int:
    """Ceiling division; no rows means no pages."""
    if total <= 0:
        return 0
    return (total + size - 1) // size


@dataclass
class Purchase:

    description: str
    date: date
    amount: Money
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(cls, description: str, purchase_date: date, amount) -> "Purchase":
        """Build a new purchase from a major-unit amount."""
        if amount is None:
            raise ValidationError("purchase amount is required", field="amount")
        try:
            money = Money.from_major_units(amount)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise ValidationError(f"invalid purchase amount '{amount}'", field="amount") from e

        now = datetime.now(timezone.utc)
        return cls(
            description=description,
            date=purchase_date,
            amount=money,
            created_at=now,
            updated_at=now,
        )

    def validate(self) -> None:
        if not self.description or not self.description.strip():
            raise ValidationError("description is required", field="description")
        if len(self.description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"description must not exceed {DESCRIPTION_MAX_LENGTH} characters",
                field="description",
            )
        if self.date is None or self.date == date.min:
            raise ValidationError("transaction date is required", field="date")
        # Every stored purchase must be convertible.
        validity_window_start(self.date)
        if not self.amount.is_positive():
            raise ValidationError("purchase amount must be positive", field="amount")
        if self.amount.minor_units > MAX_AMOUNT_MINOR_UNITS:
            raise ValidationError(
                f"purchase amount must not exceed {Money(MAX_AMOUNT_MINOR_UNITS)}",
                field="amount",
            )


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a single conversion request. Never persisted."""

    purchase: Purchase
    target_currency: CurrencyCode
    exchange_rate: Decimal
    converted_amount: Money
    effective_date: date


@dataclass(frozen=True)
class PurchasePage:

    items: list[Purchase]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return calculate_total_pages(self.total, self.size)
