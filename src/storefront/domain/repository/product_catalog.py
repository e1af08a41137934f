"""Abstract read-only view of the product catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import ProductInfo


class ProductCatalog(ABC):

    @abstractmethod
    def get_info(self, product_id: str, variant_id: str | None) -> ProductInfo | None:
        """Return current display data for a product variant, or None."""
