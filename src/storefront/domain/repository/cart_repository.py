"""Abstract cart store.

Defined in the domain layer so the domain never depends on
infrastructure. The cart itself is owned by another part of the shop;
the pricing engine only reads its lines.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartLine


class CartRepository(ABC):

    @abstractmethod
    def get_lines(self, cart_id: str) -> list[CartLine]:
        """Return the lines of a cart; raise EntityNotFoundError if unknown."""
