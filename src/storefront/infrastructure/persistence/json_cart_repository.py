"""JSON-file-backed implementation of CartRepository.

File layout::

    [{"id": "cart-1", "lines": [{"product_id": "1", "variant_id": "1-M",
      "quantity": 2, "unit_price": "20.00", "original_unit_price": "25.00"}]}]
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path, currency: str = "EUR") -> None:
        self._file = JsonFile(file_path)
        self._currency = currency

    def get_lines(self, cart_id: str) -> list[CartLine]:
        for raw in self._file.load():
            if str(raw["id"]) == cart_id:
                return [self._to_domain(line) for line in raw.get("lines", [])]
        raise EntityNotFoundError(f"Cart '{cart_id}' not found")

    def _to_domain(self, raw: dict) -> CartLine:
        unit_price = Money.of(raw["unit_price"], self._currency)
        original = raw.get("original_unit_price")
        return CartLine(
            product_id=str(raw["product_id"]),
            variant_id=raw.get("variant_id"),
            quantity=Quantity(raw["quantity"]),
            unit_price=unit_price,
            original_unit_price=(
                Money.of(original, self._currency) if original is not None else unit_price
            ),
        )
