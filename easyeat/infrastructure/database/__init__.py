"""
Database Infrastructure

Engine/session management and ORM models for the remote order store.
"""

from .models import Base, OrderRecord
from .operations import DatabaseManager

__all__ = ["Base", "DatabaseManager", "OrderRecord"]
