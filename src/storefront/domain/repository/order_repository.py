"""Abstract repository for placed orders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import OrderSnapshot


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> OrderSnapshot | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> OrderSnapshot | None:
        """Return the order placed under ``key``, or None."""

    @abstractmethod
    def save(self, snapshot: OrderSnapshot) -> int:
        """Persist a new order snapshot and return its assigned ID."""
