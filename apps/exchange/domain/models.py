"""
Pure domain entities (POPOs).
No dependency on Django or the ORM.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from uuid import uuid4, UUID

from apps.exchange.domain.exceptions import (
    InvalidCurrencyError,
    MissingEffectiveDateError,
    NonPositiveRateError,
    SameCurrencyError,
    ValidationError,
)

VALIDITY_WINDOW_MONTHS = 6

_CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")
_CENTS = Decimal("100")


def subtract_months(value: date, months: int) -> date:
    """
    Calendar month subtraction that keeps the day of month.

    A day that does not exist in the target month rolls forward by the
    overflow (Aug 31 minus 6 months is "Feb 31", i.e. Mar 3 or Mar 2).
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    return date(year, month + 1, 1) + timedelta(days=value.day - 1)


def validity_window_start(purchase_date: date) -> date:
    """
    Raises:
        ValidationError: if the window would start before the first representable date.
    """
    try:
        return subtract_months(purchase_date, VALIDITY_WINDOW_MONTHS)
    except (ValueError, OverflowError) as e:
        raise ValidationError(
            f"date {purchase_date.isoformat()} is too early to look back "
            f"{VALIDITY_WINDOW_MONTHS} months",
            field="date",
        ) from e


@dataclass(frozen=True)
class CurrencyCode:

    value: str

    @classmethod
    def parse(cls, raw) -> "CurrencyCode":
        """
        Normalize and validate a raw currency code.

        Raises:
            InvalidCurrencyError: if the trimmed, upper-cased input is not
                exactly three letters A-Z.
        """
        if raw is None:
            raise InvalidCurrencyError("currency code is required")
        if isinstance(raw, CurrencyCode):
            raw = raw.value
        normalized = str(raw).strip().upper()
        if not _CURRENCY_CODE_RE.match(normalized):
            raise InvalidCurrencyError(
                f"invalid currency code '{raw}': must be 3 letters A-Z",
                currency=str(raw),
            )
        return cls(normalized)

    def is_valid(self) -> bool:
        return isinstance(self.value, str) and bool(_CURRENCY_CODE_RE.match(self.value))

    def __str__(self) -> str:
        return self.value


USD = CurrencyCode("USD")
EUR = CurrencyCode("EUR")
GBP = CurrencyCode("GBP")
JPY = CurrencyCode("JPY")
CAD = CurrencyCode("CAD")
AUD = CurrencyCode("AUD")
CNY = CurrencyCode("CNY")
BRL = CurrencyCode("BRL")
MXN = CurrencyCode("MXN")
CHF = CurrencyCode("CHF")
INR = CurrencyCode("INR")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True, order=True)
class Money:
    """Amount held as an exact integer count of minor units (cents)."""

    minor_units: int

    def __post_init__(self):
        if not isinstance(self.minor_units, int) or isinstance(self.minor_units, bool):
            raise TypeError(f"minor_units must be an int, got {type(self.minor_units).__name__}")

    @classmethod
    def from_major_units(cls, amount) -> "Money":
        cents = (_to_decimal(amount) * _CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(cents))

    @classmethod
    def convert(cls, amount: "Money", rate) -> "Money":
        # Single multiplication, rounded once at the minor unit.
        return cls.from_major_units(amount.to_major_units() * _to_decimal(rate))

    def to_major_units(self) -> Decimal:
        return (Decimal(self.minor_units) / _CENTS).quantize(Decimal("0.01"))

    def is_positive(self) -> bool:
        return self.minor_units > 0

    def __str__(self) -> str:
        return str(self.to_major_units())


@dataclass(frozen=True)
class ExchangeRate:
    """
    1 unit of ``from_currency`` equals ``rate`` units of ``to_currency``,
    as observed on ``effective_date``.
    """

    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate: Decimal
    effective_date: date | None
    record_date: date | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None

    def validate(self) -> None:
        for currency in (self.from_currency, self.to_currency):
            if not isinstance(currency, CurrencyCode) or not currency.is_valid():
                raise InvalidCurrencyError(
                    f"invalid currency code '{currency}'", currency=str(currency)
                )
        if self.from_currency == self.to_currency:
            raise SameCurrencyError(
                "from_currency and to_currency must be different",
                currency=str(self.from_currency),
            )
        if self.rate is None or self.rate <= 0:
            raise NonPositiveRateError(f"rate must be positive, got {self.rate}", rate=str(self.rate))
        if self.effective_date is None:
            raise MissingEffectiveDateError("effective_date is required")

    def is_valid_for(self, purchase_date: date) -> bool:
        if self.effective_date is None:
            return False
        return validity_window_start(purchase_date) <= self.effective_date <= purchase_date

    def convert(self, amount: Money) -> Money:
        return Money.convert(amount, self.rate)
