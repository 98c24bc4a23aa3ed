"""
Order status vocabularies

The chef side tracks an order at operational granularity; the customer
history shows a coarser view of the same order.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Operational status of a remotely persisted order"""

    NEW = "new"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


class CustomerOrderStatus(str, Enum):
    """Customer-facing status shown in order history"""

    IN_PROGRESS = "in-progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value
