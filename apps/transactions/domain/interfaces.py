from abc import ABC, abstractmethod
from uuid import UUID

from apps.transactions.domain.models import Purchase


class PurchaseRepositoryInterface(ABC):

    @abstractmethod
    def save(self, purchase: Purchase) -> Purchase:
        """Persist a new purchase and return it as stored."""

    @abstractmethod
    def get_by_id(self, purchase_id: UUID) -> Purchase | None:
        pass

    @abstractmethod
    def list_paginated(self, page: int, size: int) -> tuple[list[Purchase], int]:
        """One page of purchases plus the total row count."""

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def exists(self, purchase_id: UUID) -> bool:
        pass

    @abstractmethod
    def update(self, purchase: Purchase) -> Purchase:
        pass

    @abstractmethod
    def delete(self, purchase_id: UUID) -> None:
        pass
