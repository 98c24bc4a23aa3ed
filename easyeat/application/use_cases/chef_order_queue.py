"""
Chef order queue

Remote orders for one seller, and the status changes a chef makes to them.
Changes reach customers on their next refresh.
"""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import Dict, List

from easyeat.domain.entities.order_entity import Order
from easyeat.domain.repositories.order_repository import OrderRepository
from easyeat.domain.services.order_status_machine import OrderStatusMachine, StatusLike
from easyeat.domain.value_objects.order_id import OrderId
from easyeat.domain.value_objects.order_status import OrderStatus
from easyeat.infrastructure.utilities.exceptions import (
    OrderNotFoundError,
    RemoteQueryError,
    TransitionError,
)


class ChefOrderQueue:
    """Use case for managing a seller's incoming orders"""

    def __init__(self, order_repository: OrderRepository):
        self._order_repository = order_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_orders(self, seller_id: str) -> List[Order]:
        """
        Remote orders for a seller, newest first

        A rejected ordered query falls back to the unordered query sorted
        here; a failing fallback raises RemoteUnavailableError.
        """
        if not seller_id:
            self._logger.warning("⚠️ LIST ORDERS: empty seller id")
            return []

        try:
            records = await self._order_repository.get_orders_by_seller(seller_id)
        except RemoteQueryError as e:
            self._logger.warning(
                "⚠️ ORDERED QUERY FAILED for seller %s, sorting locally: %s",
                seller_id,
                e,
            )
            records = await self._order_repository.get_orders_by_seller(
                seller_id, ordered=False
            )
            records = sorted(records, key=_created_at_key, reverse=True)

        orders = []
        for record in records:
            try:
                order = Order.from_dict(record)
                status = OrderStatusMachine.parse_status(order.status)
            except (KeyError, ValueError) as e:
                self._logger.warning(
                    "⚠️ SKIPPING ORDER %s for seller %s: %s",
                    record.get("id"),
                    seller_id,
                    e,
                )
                continue
            orders.append(replace(order, status=status.value))

        self._logger.info("📋 SELLER %s: %d orders", seller_id, len(orders))
        return orders

    async def get_order(self, order_id: str) -> Order:
        """Read one remote order"""
        record = await self._order_repository.get_order_by_id(OrderId(order_id))
        if record is None:
            raise OrderNotFoundError(order_id)
        order = Order.from_dict(record)
        status = OrderStatusMachine.parse_status(order.status)
        return replace(order, status=status.value)

    def available_actions(self, order: Order) -> List[OrderStatus]:
        """Statuses the chef may move this order to"""
        return OrderStatusMachine.allowed_transitions(order.status)

    async def advance(self, order_id: str, target_status: StatusLike) -> Order:
        """
        Move an order to another status

        Raises:
            OrderNotFoundError: If the order does not exist
            TransitionError: If the change is not allowed from the current status
        """
        order = await self.get_order(order_id)

        try:
            target = OrderStatusMachine.validate_transition(order.status, target_status)
        except TransitionError:
            self._logger.warning(
                "🚫 ADVANCE REJECTED: %s %s → %s", order_id, order.status, target_status
            )
            raise

        written = await self._order_repository.update_order_status(
            OrderId(order_id), target.value
        )
        if not written:
            raise OrderNotFoundError(order_id)

        self._logger.info(
            "👨‍🍳 ORDER %s: %s → %s", order_id, order.status, target.value
        )
        return order.with_status(target.value)


def _created_at_key(record: Dict) -> datetime:
    value = record.get("created_at")
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if value:
        parsed = datetime.fromisoformat(str(value))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.min.replace(tzinfo=UTC)
