"""Abstract unit of work for order placement.

Groups the order write and the promo usage increment so they commit
together or not at all.  Entering the context also serialises placements,
which is what makes the usage-limit re-check race free.

    with uow:
        uow.promo_codes.increment_usage(usage)
        uow.orders.save(snapshot)
        uow.commit()

Leaving the block without ``commit()`` (or through an exception) rolls
everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.promo_code_repository import PromoCodeRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    promo_codes: PromoCodeRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._end()

    @abstractmethod
    def commit(self) -> None:
        """Make every change staged since entering durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes; a no-op after ``commit()``."""

    @abstractmethod
    def _begin(self) -> None:
        """Acquire exclusive access and start staging changes."""

    @abstractmethod
    def _end(self) -> None:
        """Release exclusive access."""
