"""
Repository pattern implementation for purchases.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from django.db import DatabaseError

from apps.exchange.domain.exceptions import NotFoundError, RepositoryError
from apps.exchange.domain.models import Money
from apps.transactions.domain.interfaces import PurchaseRepositoryInterface
from apps.transactions.domain.models import Purchase
from apps.transactions.infrastructure.persistence.models import Purchase as PurchaseModel


def to_domain(row: PurchaseModel) -> Purchase:
    return Purchase(
        id=row.id,
        description=row.description,
        date=row.date,
        amount=Money(row.amount_minor_units),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class PurchaseRepository(PurchaseRepositoryInterface):
    """Repository for Purchase aggregate."""

    def save(self, purchase: Purchase) -> Purchase:
        try:
            row = PurchaseModel.objects.create(
                id=purchase.id,
                description=purchase.description,
                date=purchase.date,
                amount_minor_units=purchase.amount.minor_units,
            )
        except (DatabaseError, OverflowError) as e:
            raise RepositoryError(f"failed to save transaction {purchase.id}: {e}", purchase_id=str(purchase.id)) from e
        return to_domain(row)

    def get_by_id(self, purchase_id: UUID) -> Optional[Purchase]:
        """Get purchase by id, None when absent."""
        try:
            row = PurchaseModel.objects.filter(id=purchase_id).first()
        except DatabaseError as e:
            raise RepositoryError(
                f"failed to retrieve transaction {purchase_id}: {e}", purchase_id=str(purchase_id)
            ) from e
        return to_domain(row) if row else None

    def list_paginated(self, page: int, size: int) -> Tuple[List[Purchase], int]:
        """Newest purchases first."""
        offset = (page - 1) * size
        try:
            total = PurchaseModel.objects.count()
            rows = list(PurchaseModel.objects.order_by("-date", "-created_at")[offset:offset + size])
        except DatabaseError as e:
            raise RepositoryError(f"failed to retrieve transactions page {page}: {e}", page=page, size=size) from e
        return [to_domain(row) for row in rows], total

    def count(self) -> int:
        try:
            return PurchaseModel.objects.count()
        except DatabaseError as e:
            raise RepositoryError(f"failed to count transactions: {e}") from e

    def exists(self, purchase_id: UUID) -> bool:
        try:
            return PurchaseModel.objects.filter(id=purchase_id).exists()
        except DatabaseError as e:
            raise RepositoryError(
                f"failed to check transaction {purchase_id}: {e}", purchase_id=str(purchase_id)
            ) from e

    def update(self, purchase: Purchase) -> Purchase:
        try:
            row = PurchaseModel.objects.filter(id=purchase.id).first()
            if row is None:
                raise NotFoundError(
                    f"transaction not found with id: {purchase.id}", purchase_id=str(purchase.id)
                )
            row.description = purchase.description
            row.date = purchase.date
            row.amount_minor_units = purchase.amount.minor_units
            row.save()
        except (DatabaseError, OverflowError) as e:
            raise RepositoryError(
                f"failed to update transaction {purchase.id}: {e}", purchase_id=str(purchase.id)
            ) from e
        return to_domain(row)

    def delete(self, purchase_id: UUID) -> None:
        try:
            deleted, _ = PurchaseModel.objects.filter(id=purchase_id).delete()
        except DatabaseError as e:
            raise RepositoryError(
                f"failed to delete transaction {purchase_id}: {e}", purchase_id=str(purchase_id)
            ) from e
        if not deleted:
            raise NotFoundError(f"transaction not found with id: {purchase_id}", purchase_id=str(purchase_id))
