"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import MovementDTO, OrderDTO, movement_to_dto, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            payment = uow.payments.get_by_order_id(order_id)
        return order_to_dto(order, payment)

    def movements(self, order_id: int) -> list[MovementDTO]:
        """Stock movements that reference the order."""
        with self._uow as uow:
            if uow.orders.get_by_id(order_id) is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            movements = uow.movements.list_for_order(order_id)
        return [movement_to_dto(m) for m in movements]
