"""Cart lines as handed over by the cart store, plus catalog display data.

Both are read-only to the pricing engine.  ``unit_price`` is what the
customer pays; ``original_unit_price`` is the "compare at" price used to
show the product-level discount.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartLine:

    product_id: str
    variant_id: str | None
    quantity: Quantity
    unit_price: Money
    original_unit_price: Money

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValidationError("Cart line must reference a product")
        if self.original_unit_price < self.unit_price:
            raise ValidationError(
                f"Original price {self.original_unit_price} of product "
                f"'{self.product_id}' is below its selling price {self.unit_price}"
            )

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def original_line_total(self) -> Money:
        return self.original_unit_price * self.quantity.value

    @property
    def is_discounted(self) -> bool:
        return self.original_unit_price > self.unit_price


@dataclass(frozen=True)
class ProductInfo:
    """Display data of a product variant, copied verbatim into orders."""

    name: str
    sku: str
    image_url: str | None = None
