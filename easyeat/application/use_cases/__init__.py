"""
Application use cases and stores
"""

from .cart_store import CartStore
from .checkout_use_case import CheckoutUseCase
from .chef_order_queue import ChefOrderQueue
from .order_history_store import OrderHistoryStore

__all__ = ["CartStore", "CheckoutUseCase", "ChefOrderQueue", "OrderHistoryStore"]
