"""
Order history store

Owns the current customer's placed orders: the local optimistic list,
persisted to durable local storage, and the remote list read back from the
document store. The two are reconciled only when the display list is built.
"""

import asyncio
import json
import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import Callable, List, Optional, Set, Tuple

from easyeat.application.dtos.order_dtos import OrderInfo
from easyeat.application.services.auto_delivery_scheduler import AutoDeliveryScheduler
from easyeat.domain.entities.cart_line import CartSnapshot
from easyeat.domain.entities.order_entity import Order
from easyeat.domain.repositories.local_storage import KeyValueStorage
from easyeat.domain.repositories.order_repository import OrderRepository
from easyeat.domain.services.order_status_machine import OrderStatusMachine, StatusLike
from easyeat.domain.value_objects.delivery_address import DeliveryAddress
from easyeat.domain.value_objects.money import Money
from easyeat.domain.value_objects.order_id import OrderId
from easyeat.domain.value_objects.order_status import CustomerOrderStatus, OrderStatus
from easyeat.domain.value_objects.user_session import UserSession
from easyeat.infrastructure.utilities.constants import BusinessSettings
from easyeat.infrastructure.utilities.exceptions import (
    OrderNotFoundError,
    RemoteUnavailableError,
    TransitionError,
    ValidationError,
)

SessionAccessor = Callable[[], Optional[UserSession]]

# Failures of the document store or local disk that background paths absorb
SOFT_REMOTE_ERRORS = (RemoteUnavailableError, OSError)


class OrderHistoryStore:  # pylint: disable=too-many-instance-attributes
    """
    Order history for one customer session

    Handles:
    1. Placing orders (local commit, then best-effort remote sync)
    2. Refreshing the remote list (joined while in flight, optional polling)
    3. Building the reconciled display list
    4. Status updates on the local copy, mirrored to the remote copy
    5. Auto-delivery timers for local orders
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        local_storage: KeyValueStorage,
        session_accessor: SessionAccessor,
        delivery_fee: Optional[Money] = None,
        auto_delivery_enabled: bool = True,
        auto_delivery_delay_seconds: float = BusinessSettings.AUTO_DELIVERY_DELAY_SECONDS,
        refresh_interval_seconds: float = BusinessSettings.ORDER_REFRESH_INTERVAL_SECONDS,
    ):
        self._order_repository = order_repository
        self._local_storage = local_storage
        self._session_accessor = session_accessor
        self._delivery_fee = delivery_fee or Money.from_float(
            BusinessSettings.DEFAULT_DELIVERY_FEE
        )
        self._auto_delivery_enabled = auto_delivery_enabled
        self._refresh_interval_seconds = refresh_interval_seconds
        self._scheduler = AutoDeliveryScheduler(
            auto_delivery_delay_seconds, self._on_auto_delivery_due
        )
        self._logger = logging.getLogger(self.__class__.__name__)

        self._local_orders: List[Order] = []
        self._remote_orders: List[Order] = []

        self._refresh_task: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._background_tasks: Set[asyncio.Task] = set()
        self._is_loading = False

        self._load_local_orders()

    # Read-only views

    @property
    def local_orders(self) -> Tuple[Order, ...]:
        return tuple(self._local_orders)

    @property
    def remote_orders(self) -> Tuple[Order, ...]:
        return tuple(self._remote_orders)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def scheduler(self) -> AutoDeliveryScheduler:
        return self._scheduler

    # Placing orders

    def commit_local_order(self, snapshot: CartSnapshot, address: str) -> Order:
        """
        Local phase of placing an order

        Validates the cart and address, appends the order to the local list
        with status in-progress, persists it and arms the auto-delivery timer.
        Must run on the event loop when auto-delivery is enabled.

        Raises:
            ValidationError: If the cart is empty or the address is empty
        """
        if snapshot.is_empty:
            self._logger.warning("🚫 CHECKOUT REJECTED: empty cart")
            raise ValidationError("Cart is empty", field="cart")

        try:
            delivery_address = DeliveryAddress(address)
        except ValueError as e:
            self._logger.warning("🚫 CHECKOUT REJECTED: %s", e)
            raise ValidationError(str(e), field="delivery_address") from e

        session = self._session_accessor()
        seller_id, seller_name = snapshot.dominant_seller()

        order = Order(
            id=OrderId.generate().value,
            lines=snapshot.lines,
            items_subtotal=snapshot.items_subtotal,
            delivery_fee=Money(self._delivery_fee.amount, snapshot.currency),
            delivery_address=delivery_address.value,
            status=CustomerOrderStatus.IN_PROGRESS.value,
            created_at=datetime.now(UTC),
            customer_id=session.user_id if session else None,
            customer_name=session.display_name if session else None,
            seller_id=seller_id,
            seller_name=seller_name,
        )

        self._local_orders.append(order)
        self._persist_local_orders()

        if self._auto_delivery_enabled:
            self._scheduler.schedule(order.id)

        self._logger.info(
            "✅ ORDER PLACED LOCALLY: %s (%d items, total %s, seller %s)",
            order.id,
            order.item_count,
            order.total,
            seller_id or "-",
        )
        return order

    async def sync_remote_order(self, order: Order) -> bool:
        """
        Remote phase of placing an order

        Creates the remote record with status new under the same id, then
        refreshes. Failures are logged and reported as False.
        """
        session = self._session_accessor()
        if session is None:
            self._logger.info("📴 REMOTE SYNC SKIPPED for %s: not signed in", order.id)
            return False

        order_data = order.to_dict()
        order_data.update(
            {
                "status": OrderStatus.NEW.value,
                "customer_id": order.customer_id or session.user_id,
                "customer_name": order.customer_name or session.display_name,
            }
        )
        # Creation time is assigned by the document store
        order_data.pop("created_at", None)
        order_data.pop("updated_at", None)

        try:
            await self._order_repository.create_order(order_data)
        except SOFT_REMOTE_ERRORS as e:
            self._logger.warning(
                "⚠️ REMOTE SYNC FAILED for %s, keeping local copy: %s", order.id, e
            )
            return False

        self._logger.info("☁️ ORDER SYNCED: %s", order.id)
        await self.refresh()
        return True

    async def place_order(self, snapshot: CartSnapshot, address: str) -> Order:
        """
        Place an order from a cart snapshot

        Returns the local order as soon as it is committed; the remote write
        runs as a background task when a customer is signed in.
        """
        order = self.commit_local_order(snapshot, address)

        if self._session_accessor() is not None:
            task = asyncio.create_task(self.sync_remote_order(order))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)

        return order

    async def wait_for_background_sync(self) -> None:
        """Wait for pending remote writes started by place_order"""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # Refreshing

    async def refresh(self) -> bool:
        """
        Re-fetch the remote list for the signed-in customer

        A call made while a fetch is in flight waits for that fetch instead
        of starting another. Returns True when a fetch result was applied.
        """
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._fetch_remote_orders())
        return await asyncio.shield(self._refresh_task)

    async def _fetch_remote_orders(self) -> bool:
        session = self._session_accessor()
        if session is None:
            self._logger.debug("📴 REFRESH SKIPPED: not signed in")
            return False

        user_id = session.user_id
        self._is_loading = True
        try:
            records = await self._order_repository.get_orders_by_customer(user_id)
        except SOFT_REMOTE_ERRORS as e:
            self._logger.warning("⚠️ REFRESH FAILED, keeping previous orders: %s", e)
            return False
        finally:
            self._is_loading = False

        current = self._session_accessor()
        if current is None or current.user_id != user_id:
            self._logger.info("🔁 REFRESH DISCARDED: user changed while fetching")
            return False

        self._remote_orders = self._parse_remote_records(records)
        self._cancel_timers_for_terminal_remote_orders()
        self._logger.info(
            "🔄 REFRESHED: %d remote orders for %s", len(self._remote_orders), user_id
        )
        return True

    def _parse_remote_records(self, records) -> List[Order]:
        orders = []
        for record in records:
            try:
                order = Order.from_dict(record)
                status = OrderStatusMachine.parse_status(order.status)
            except (KeyError, ValueError) as e:
                self._logger.warning(
                    "⚠️ SKIPPING REMOTE ORDER %s: %s", record.get("id"), e
                )
                continue
            orders.append(replace(order, status=status.value))
        return orders

    def _cancel_timers_for_terminal_remote_orders(self) -> None:
        for order in self._remote_orders:
            if OrderStatusMachine.is_terminal(order.status):
                self._scheduler.cancel(order.id)

    def start_polling(self, interval_seconds: Optional[float] = None) -> None:
        """Refresh periodically until stop_polling() or aclose()"""
        if self._poll_task is not None and not self._poll_task.done():
            return
        interval = interval_seconds
        if interval is None:
            interval = self._refresh_interval_seconds
        self._poll_task = asyncio.create_task(self._poll_loop(interval))
        self._logger.info("▶️ POLLING STARTED every %.1fs", interval)

    def stop_polling(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
            self._logger.info("⏸️ POLLING STOPPED")
        self._poll_task = None

    async def _poll_loop(self, interval: float) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:  # pylint: disable=broad-except
                # The loop outlives a single bad refresh
                self._logger.error("💥 POLL REFRESH FAILED", exc_info=True)
            await asyncio.sleep(interval)

    # Display

    def get_display_list(self) -> List[OrderInfo]:
        """
        Reconciled list for the customer, newest first

        Signed in: the customer's remote orders plus local orders of the
        same customer that have no remote copy yet. Signed out: the local
        list. Statuses are in the customer vocabulary.
        """
        session = self._session_accessor()

        if session is None:
            infos = [self._local_info(order) for order in self._local_orders]
        else:
            remote = [
                order
                for order in self._remote_orders
                if order.customer_id == session.user_id
            ]
            remote_ids = {order.id for order in remote}
            infos = [
                OrderInfo.from_order(
                    order,
                    OrderStatusMachine.to_customer_status(order.status).value,
                    "remote",
                )
                for order in remote
            ]
            infos.extend(
                self._local_info(order)
                for order in self._local_orders
                if order.customer_id == session.user_id and order.id not in remote_ids
            )

        infos.sort(key=lambda info: info.created_at, reverse=True)
        return infos

    @staticmethod
    def _local_info(order: Order) -> OrderInfo:
        return OrderInfo.from_order(order, order.status, "local")

    # Status updates

    async def update_status(self, order_id: str, status: StatusLike) -> Order:
        """
        Apply a status change to an order

        The local copy moves through the customer transitions and the change
        is mirrored to the remote copy when possible. An order known only
        remotely is moved through the operational transitions.

        Raises:
            OrderNotFoundError: If neither list holds the order
            TransitionError: If the change is not allowed
        """
        local = self._find_local(order_id)
        remote = self._find_remote(order_id)

        if local is None and remote is None:
            raise OrderNotFoundError(order_id)

        if local is None:
            return await self._update_remote_only(remote, status)

        # Once a remote copy exists it is the one the customer sees
        current = local.status
        if remote is not None:
            current = OrderStatusMachine.to_customer_status(remote.status).value

        target = OrderStatusMachine.validate_customer_transition(current, status)
        updated = local.with_status(target.value)
        self._replace_local(updated)
        self._persist_local_orders()

        if OrderStatusMachine.is_terminal(target):
            self._scheduler.cancel(order_id)

        self._logger.info("📝 LOCAL STATUS: %s %s → %s", order_id, current, target.value)

        if remote is not None:
            await self._mirror_remote_status(remote, target)

        return updated

    async def _update_remote_only(self, remote: Order, status: StatusLike) -> Order:
        target = self._remote_target(status)
        if target is None:
            raise TransitionError(remote.status, str(status))

        OrderStatusMachine.validate_transition(remote.status, target)
        written = await self._order_repository.update_order_status(
            OrderId(remote.id), target.value
        )
        if not written:
            raise OrderNotFoundError(remote.id)

        updated = remote.with_status(target.value)
        self._replace_remote(updated)
        self._logger.info(
            "📝 REMOTE STATUS: %s %s → %s", remote.id, remote.status, target.value
        )
        return updated

    async def _mirror_remote_status(
        self, remote: Order, target: CustomerOrderStatus
    ) -> bool:
        remote_target = OrderStatusMachine.to_operational_status(target)
        if remote_target is None:
            return False

        if not OrderStatusMachine.can_transition(remote.status, remote_target):
            self._logger.warning(
                "⚠️ REMOTE MIRROR SKIPPED for %s: %s → %s not allowed",
                remote.id,
                remote.status,
                remote_target.value,
            )
            return False

        try:
            written = await self._order_repository.update_order_status(
                OrderId(remote.id), remote_target.value
            )
        except SOFT_REMOTE_ERRORS as e:
            self._logger.warning("⚠️ REMOTE MIRROR FAILED for %s: %s", remote.id, e)
            return False

        if not written:
            self._logger.warning("⚠️ REMOTE MIRROR: %s no longer exists", remote.id)
            return False

        self._replace_remote(remote.with_status(remote_target.value))
        return True

    @staticmethod
    def _remote_target(status: StatusLike) -> Optional[OrderStatus]:
        """Operational target for a requested change, None for in-progress"""
        if isinstance(status, OrderStatus):
            return status
        value = str(status).strip().lower()
        try:
            return OrderStatusMachine.to_operational_status(CustomerOrderStatus(value))
        except ValueError:
            pass
        try:
            return OrderStatusMachine.parse_status(value)
        except ValueError:
            return None

    def _on_auto_delivery_due(self, order_id: str) -> None:
        local = self._find_local(order_id)
        if local is None or OrderStatusMachine.is_terminal(
            CustomerOrderStatus(local.status)
        ):
            self._logger.debug("⏰ AUTO DELIVERY no-op for %s", order_id)
            return

        if self._find_remote(order_id) is not None:
            self._logger.debug("⏰ AUTO DELIVERY no-op for %s: remote copy exists", order_id)
            return

        self._replace_local(local.with_status(CustomerOrderStatus.DELIVERED.value))
        self._persist_local_orders()
        self._logger.info("🚚 AUTO DELIVERED: %s", order_id)

    # Clearing and shutdown

    def clear_history(self) -> None:
        """Empty the local list and its durable copy; remote records stay"""
        self._scheduler.cancel_all()
        self._local_orders = []
        try:
            self._local_storage.remove_item(BusinessSettings.LOCAL_ORDER_HISTORY_KEY)
        except OSError as e:
            self._logger.error("💥 FAILED TO CLEAR LOCAL HISTORY: %s", e)
        self._logger.info("🗑️ LOCAL ORDER HISTORY CLEARED")

    async def aclose(self) -> None:
        """Stop polling, timers and background work"""
        self.stop_polling()
        self._scheduler.cancel_all()

        pending = list(self._background_tasks)
        if self._refresh_task is not None and not self._refresh_task.done():
            pending.append(self._refresh_task)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._background_tasks.clear()
        self._refresh_task = None

    # Local list helpers

    def _find_local(self, order_id: str) -> Optional[Order]:
        for order in self._local_orders:
            if order.id == order_id:
                return order
        return None

    def _find_remote(self, order_id: str) -> Optional[Order]:
        for order in self._remote_orders:
            if order.id == order_id:
                return order
        return None

    def _replace_local(self, updated: Order) -> None:
        self._local_orders = [
            updated if order.id == updated.id else order for order in self._local_orders
        ]

    def _replace_remote(self, updated: Order) -> None:
        self._remote_orders = [
            updated if order.id == updated.id else order
            for order in self._remote_orders
        ]

    def _load_local_orders(self) -> None:
        key = BusinessSettings.LOCAL_ORDER_HISTORY_KEY
        try:
            raw = self._local_storage.get_item(key)
            if not raw:
                return
            orders = []
            for record in json.loads(raw):
                order = Order.from_dict(record)
                status = OrderStatusMachine.parse_customer_status(order.status)
                orders.append(replace(order, status=status.value))
        except (OSError, ValueError, KeyError, TypeError) as e:
            self._logger.error("💥 FAILED TO LOAD LOCAL HISTORY, starting empty: %s", e)
            return

        self._local_orders = orders
        self._logger.info("📂 LOADED %d local orders", len(orders))

    def _persist_local_orders(self) -> None:
        try:
            payload = json.dumps([order.to_dict() for order in self._local_orders])
            self._local_storage.set_item(BusinessSettings.LOCAL_ORDER_HISTORY_KEY, payload)
        except (OSError, TypeError, ValueError) as e:
            self._logger.error("💥 FAILED TO SAVE LOCAL HISTORY: %s", e)
