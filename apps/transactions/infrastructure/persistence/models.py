"""
Django ORM models for persistence.
Infrastructure layer — technical storage detail.
"""

from django.db import models

from apps.exchange.infrastructure.persistence.models import BaseModel


class Purchase(BaseModel):

    description = models.CharField(max_length=50)
    date = models.DateField(db_index=True)
    amount_minor_units = models.BigIntegerField(
        help_text="Purchase amount in cents of the base currency.",
    )

    class Meta:
        db_table = "purchase"
        ordering = ["-date", "-created_at"]

    def __str__(self):
        return f"{self.description} | {self.date} | {self.amount_minor_units / 100:.2f}"
