"""JSON-file-backed implementation of ProductCatalog.

One record per sellable variant: ``product_id``, ``variant_id``, ``name``,
``sku`` and an optional ``image_url``.
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.cart import ProductInfo
from storefront.domain.repository.product_catalog import ProductCatalog
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonProductCatalog(ProductCatalog):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_info(self, product_id: str, variant_id: str | None) -> ProductInfo | None:
        for raw in self._file.load():
            if str(raw["product_id"]) == product_id and raw.get("variant_id") == variant_id:
                return ProductInfo(
                    name=raw["name"],
                    sku=raw.get("sku", ""),
                    image_url=raw.get("image_url"),
                )
        return None
