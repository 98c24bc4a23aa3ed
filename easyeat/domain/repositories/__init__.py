"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .local_storage import KeyValueStorage
from .order_repository import OrderRepository

__all__ = ["KeyValueStorage", "OrderRepository"]
