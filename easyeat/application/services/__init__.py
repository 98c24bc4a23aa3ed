"""
Application services
"""

from .auto_delivery_scheduler import AutoDeliveryScheduler

__all__ = ["AutoDeliveryScheduler"]
