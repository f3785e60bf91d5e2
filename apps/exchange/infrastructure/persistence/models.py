"""
Django ORM models for persistence.
Infrastructure layer — technical storage detail.
"""

import uuid
from django.db import models


class BaseModel(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CurrencyExchangeRate(BaseModel):

    from_currency = models.CharField(max_length=3, db_index=True)
    to_currency = models.CharField(max_length=3, db_index=True)
    rate = models.DecimalField(
        decimal_places=6,
        max_digits=18,
    )
    effective_date = models.DateField(db_index=True)
    record_date = models.DateField()

    class Meta:
        db_table = "exchange_rate"
        constraints = [
            models.UniqueConstraint(
                fields=["from_currency", "to_currency", "effective_date"],
                name="unique_rate_per_effective_date",
            )
        ]
        ordering = ["-effective_date", "-record_date", "-created_at"]

    def __str__(self):
        return (
            f"From {self.from_currency} To {self.to_currency} "
            f"| {self.effective_date} | {self.rate}"
        )
