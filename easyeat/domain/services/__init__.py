"""
Domain services

Stateless business rules that do not belong to a single entity.
"""

from .order_status_machine import OrderStatusMachine

__all__ = ["OrderStatusMachine"]
