#!/usr/bin/env python3
"""
Entry point for the EasyEat ordering core demo

Walks one order through its lifecycle: a customer fills a cart and checks
out, the chef starts preparing it, and the customer's refreshed history is
printed.
"""

import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from easyeat.application.dtos.order_dtos import OrderInfo
from easyeat.domain.entities.cart_line import CartLine
from easyeat.domain.value_objects.order_status import OrderStatus
from easyeat.domain.value_objects.user_session import UserRole, UserSession
from easyeat.infrastructure.configuration.config import get_config
from easyeat.infrastructure.container.dependency_injection import (
    DependencyContainer,
    initialize_container,
)
from easyeat.infrastructure.logging.logging_config import ProductionLogger

DEMO_CUSTOMER = UserSession("customer-1", "Dana", UserRole.CUSTOMER)
DEMO_CHEF = UserSession("chef-1", "Chef Amir", UserRole.CHEF)


async def run_demo(container: Optional[DependencyContainer] = None) -> List[OrderInfo]:
    """Run the demo scenario and return the customer's final history"""
    logger = logging.getLogger(__name__)
    container = container or initialize_container()
    container.get_database_manager().init_db()

    # Customer places an order
    await container.sign_in(DEMO_CUSTOMER)
    cart = container.get_cart_store()
    for item_id, name, price, quantity in (
        ("m1", "Shakshuka", 10.99, 1),
        ("m1", "Shakshuka", 10.99, 2),
        ("m2", "Pita", 1.50, 1),
    ):
        cart.add_item(
            CartLine(
                item_id,
                name,
                price,
                quantity,
                seller_id=DEMO_CHEF.user_id,
                seller_name=str(DEMO_CHEF),
            )
        )

    checkout = container.get_checkout_use_case()
    preview = checkout.preview(cart)
    logger.info(
        "🧾 PREVIEW: %d items, total %.2f %s",
        preview.item_count,
        preview.total,
        preview.currency,
    )

    response = await checkout.checkout(cart, "12 Herzl St, Tel Aviv")
    history = container.get_order_history_store()
    await history.wait_for_background_sync()
    order_id = response.order_info.order_id

    # Chef starts preparing it
    queue = container.get_chef_order_queue()
    await queue.advance(order_id, OrderStatus.PREPARING)
    for order in await queue.list_orders(DEMO_CHEF.user_id):
        logger.info("👨‍🍳 QUEUE: %s %s", order.id, order.status)

    # Customer sees the coarse status after a refresh
    await history.refresh()
    display = history.get_display_list()
    for info in display:
        print(
            f"{info.order_id}  {info.status:<12} {info.total:>8.2f} {info.currency}"
            f"  ({info.source})"
        )
    return display


async def _main() -> None:
    container = initialize_container()
    try:
        await run_demo(container)
    finally:
        await container.shutdown()


def main():
    """Load settings, configure logging and run the demo"""
    load_dotenv()
    ProductionLogger.setup_logging(get_config())
    logger = logging.getLogger(__name__)

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("Demo interrupted")
    except Exception as e:
        logger.error("Demo failed: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
