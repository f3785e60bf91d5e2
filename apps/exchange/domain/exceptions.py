"""
Domain error taxonomy.

Every error carries a machine-readable ``kind``, the HTTP status the API
layer answers with, and a ``context`` dict with the identifiers involved.
"""

from datetime import date


class DomainError(Exception):
    """Base class for every failure raised by the domain and its adapters."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, detail: str, **context):
        super().__init__(detail)
        self.detail = detail
        self.context = context

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.detail}


class ValidationError(DomainError):
    """Malformed input, the caller's fault."""

    kind = "validation_error"
    status_code = 400


class InvalidCurrencyError(ValidationError):
    pass


class SameCurrencyError(ValidationError):
    pass


class NonPositiveRateError(ValidationError):
    pass


class MissingEffectiveDateError(ValidationError):
    pass


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = 404


class InvalidConversionError(DomainError):
    """A business rule forbids the requested conversion."""

    kind = "invalid_conversion"
    status_code = 400


class NoSuitableRateError(DomainError):
    """Neither the local store nor the external source has a rate in the window."""

    kind = "no_suitable_rate"
    status_code = 422

    def __init__(self, from_currency: str, to_currency: str, purchase_date: date):
        super().__init__(
            f"no suitable exchange rate found for {from_currency}/{to_currency} "
            f"within 6 months of {purchase_date.isoformat()}",
            from_currency=str(from_currency),
            to_currency=str(to_currency),
            purchase_date=purchase_date.isoformat(),
        )


class ExternalSourceError(DomainError):
    kind = "external_source_error"
    status_code = 500


class ConfigurationError(DomainError):
    kind = "configuration_error"
    status_code = 500


class RepositoryError(DomainError):
    kind = "repository_error"
    status_code = 500


class InternalConsistencyError(DomainError):
    kind = "internal_error"
    status_code = 500
