"""
Checkout Use Case

Turns the current cart into a placed order and clears the cart afterwards.
"""

import logging

from easyeat.application.dtos.cart_dtos import CartSummary
from easyeat.application.dtos.order_dtos import OrderCreationResponse, OrderInfo
from easyeat.application.use_cases.cart_store import CartStore
from easyeat.application.use_cases.order_history_store import OrderHistoryStore
from easyeat.domain.value_objects.money import Money


class CheckoutUseCase:
    """Use case for checking out a cart"""

    def __init__(self, order_history_store: OrderHistoryStore, delivery_fee: Money):
        self._order_history_store = order_history_store
        self._delivery_fee = delivery_fee
        self._logger = logging.getLogger(self.__class__.__name__)

        self._logger.info("🏗️ CHECKOUT USE CASE INITIALIZED")
        self._logger.info("  💵 Delivery fee: %s", self._delivery_fee)

    def preview(self, cart_store: CartStore) -> CartSummary:
        """Totals of the current cart without placing anything"""
        return cart_store.summary(self._delivery_fee)

    async def checkout(self, cart_store: CartStore, address: str) -> OrderCreationResponse:
        """
        Place an order for the cart contents

        The cart is cleared only once the order is committed locally.

        Raises:
            ValidationError: If the cart or the address is empty
        """
        self._logger.info("📝 ===== CHECKOUT STARTED =====")
        self._logger.info(
            "📝 CHECKOUT: %d items, subtotal %s",
            cart_store.item_count(),
            cart_store.total_amount(),
        )

        snapshot = cart_store.snapshot()
        order = await self._order_history_store.place_order(snapshot, address)

        cart_store.clear()

        order_info = OrderInfo.from_order(order, order.status, "local")
        self._logger.info(
            "✅ CHECKOUT COMPLETE: order %s, total %s", order.id, order.total
        )
        return OrderCreationResponse(success=True, order_info=order_info)
