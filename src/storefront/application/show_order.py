"""Application service: Show Order use case (query).

Renders the stored snapshot only; the live catalog is never consulted.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        snapshot = self._order_repo.get_by_id(order_id)
        if snapshot is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return OrderDTO.from_snapshot(snapshot)
