"""
Order repository interface

Defines the contract for the remote document store holding placed orders.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..value_objects.order_id import OrderId


class OrderRepository(ABC):
    """Repository interface for remote order records

    Implementations raise RemoteUnavailableError (or RemoteQueryError for a
    rejected query) on backend failures.
    """

    @abstractmethod
    async def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new order record; the store assigns created_at"""

    @abstractmethod
    async def get_order_by_id(self, order_id: OrderId) -> Optional[Dict[str, Any]]:
        """Get order by ID"""

    @abstractmethod
    async def get_orders_by_customer(self, customer_id: str) -> List[Dict[str, Any]]:
        """Get orders placed by a customer"""

    @abstractmethod
    async def get_orders_by_seller(
        self, seller_id: str, ordered: bool = True
    ) -> List[Dict[str, Any]]:
        """Get orders for a seller, newest first when ordered is set"""

    @abstractmethod
    async def update_order_status(self, order_id: OrderId, status: str) -> bool:
        """Update order status; False when the order does not exist"""
