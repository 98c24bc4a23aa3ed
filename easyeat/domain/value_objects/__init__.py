"""
Domain value objects package

Contains immutable value objects that represent concepts in the ordering domain.
"""

from .delivery_address import DeliveryAddress
from .money import Money
from .order_id import OrderId
from .order_status import CustomerOrderStatus, OrderStatus
from .user_session import UserRole, UserSession

__all__ = [
    "CustomerOrderStatus",
    "DeliveryAddress",
    "Money",
    "OrderId",
    "OrderStatus",
    "UserRole",
    "UserSession",
]
