"""
SQLAlchemy Order Repository

Concrete implementation of OrderRepository using SQLAlchemy ORM. Stands in
for the managed document store: equality filters on customer_id/seller_id,
optional newest-first ordering and server-assigned timestamps.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from easyeat.domain.repositories.order_repository import OrderRepository
from easyeat.domain.value_objects.order_id import OrderId
from easyeat.infrastructure.database.models import OrderRecord
from easyeat.infrastructure.database.operations import DatabaseManager
from easyeat.infrastructure.logging.logging_config import PerformanceLogger
from easyeat.infrastructure.utilities.exceptions import (
    RemoteQueryError,
    RemoteUnavailableError,
)


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of OrderRepository"""

    def __init__(self, database_manager: DatabaseManager):
        self._db = database_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new order"""
        self._logger.info(
            "📝 CREATE ORDER: %s for customer %s",
            order_data.get("id"),
            order_data.get("customer_id"),
        )

        try:
            with PerformanceLogger("orders.create", self._logger):
                with self._db.managed_session() as session:
                    record = OrderRecord(
                        id=order_data["id"],
                        customer_id=order_data.get("customer_id"),
                        customer_name=order_data.get("customer_name"),
                        seller_id=order_data.get("seller_id") or "",
                        seller_name=order_data.get("seller_name") or "",
                        items=order_data.get("items", []),
                        currency=order_data.get("currency", "USD"),
                        subtotal=order_data["subtotal"],
                        delivery_fee=order_data["delivery_fee"],
                        total=order_data["total"],
                        address=order_data["address"],
                        status=order_data.get("status", "new"),
                        notes=order_data.get("notes"),
                    )
                    session.add(record)
                    session.flush()
                    # Pull server-assigned timestamps
                    session.refresh(record)
                    result = self._to_dict(record)

            self._logger.info("✅ ORDER CREATION SUCCESS: %s", result["id"])
            return result

        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR creating order: %s", e)
            raise RemoteUnavailableError(
                f"Failed to create order: {e}", operation="create_order"
            ) from e

    async def get_order_by_id(self, order_id: OrderId) -> Optional[Dict[str, Any]]:
        """Get order by ID"""
        self._logger.info("🔍 GET ORDER BY ID: %s", order_id.value)

        try:
            with PerformanceLogger("orders.get_by_id", self._logger):
                with self._db.managed_session() as session:
                    record = session.get(OrderRecord, order_id.value)
                    if record is None:
                        self._logger.info("📭 ORDER NOT FOUND: ID %s", order_id.value)
                        return None
                    return self._to_dict(record)

        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR getting order by ID: %s", e)
            raise RemoteUnavailableError(
                f"Failed to load order {order_id.value}: {e}",
                operation="get_order_by_id",
            ) from e

    async def get_orders_by_customer(self, customer_id: str) -> List[Dict[str, Any]]:
        """Get orders by customer ID, newest first"""
        self._logger.info("📋 GET ORDERS BY CUSTOMER: %s", customer_id)

        try:
            with PerformanceLogger("orders.by_customer", self._logger):
                with self._db.managed_session() as session:
                    records = session.scalars(
                        select(OrderRecord)
                        .where(OrderRecord.customer_id == customer_id)
                        .order_by(OrderRecord.created_at.desc())
                    ).all()
                    result = [self._to_dict(record) for record in records]

            self._logger.info("📊 FOUND %d ORDERS for customer %s", len(result), customer_id)
            return result

        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR getting customer orders: %s", e)
            raise RemoteUnavailableError(
                f"Failed to load orders for customer {customer_id}: {e}",
                operation="get_orders_by_customer",
            ) from e

    async def get_orders_by_seller(
        self, seller_id: str, ordered: bool = True
    ) -> List[Dict[str, Any]]:
        """Get orders by seller ID"""
        self._logger.info("📋 GET ORDERS BY SELLER: %s (ordered=%s)", seller_id, ordered)

        query = select(OrderRecord).where(OrderRecord.seller_id == seller_id)
        if ordered:
            query = query.order_by(OrderRecord.created_at.desc())

        try:
            with PerformanceLogger("orders.by_seller", self._logger):
                with self._db.managed_session() as session:
                    records = session.scalars(query).all()
                    result = [self._to_dict(record) for record in records]

            self._logger.info("📊 FOUND %d ORDERS for seller %s", len(result), seller_id)
            return result

        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR getting seller orders: %s", e)
            error_class = RemoteQueryError if ordered else RemoteUnavailableError
            raise error_class(
                f"Failed to load orders for seller {seller_id}: {e}",
                operation="get_orders_by_seller",
            ) from e

    async def update_order_status(self, order_id: OrderId, status: str) -> bool:
        """Update order status"""
        self._logger.info("🔄 UPDATE ORDER STATUS: %s → %s", order_id.value, status)

        try:
            with PerformanceLogger("orders.update_status", self._logger):
                with self._db.managed_session() as session:
                    record = session.get(OrderRecord, order_id.value)
                    if record is None:
                        self._logger.warning("📭 ORDER NOT FOUND: ID %s", order_id.value)
                        return False
                    record.status = str(status)

            self._logger.info("✅ ORDER STATUS UPDATED: %s", order_id.value)
            return True

        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR updating order status: %s", e)
            raise RemoteUnavailableError(
                f"Failed to update order {order_id.value}: {e}",
                operation="update_order_status",
            ) from e

    @staticmethod
    def _to_dict(record: OrderRecord) -> Dict[str, Any]:
        return {
            "id": record.id,
            "customer_id": record.customer_id,
            "customer_name": record.customer_name,
            "seller_id": record.seller_id,
            "seller_name": record.seller_name,
            "items": list(record.items or []),
            "currency": record.currency,
            "subtotal": record.subtotal,
            "delivery_fee": record.delivery_fee,
            "total": record.total,
            "address": record.address,
            "status": record.status,
            "notes": record.notes,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }
