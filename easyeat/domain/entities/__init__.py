"""
Domain entities package

Contains the core business entities of the EasyEat ordering core.
"""

from .cart_line import CartLine, CartSnapshot
from .order_entity import Order

__all__ = ["CartLine", "CartSnapshot", "Order"]
