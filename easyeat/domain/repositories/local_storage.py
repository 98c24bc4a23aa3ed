"""
Durable local storage interface

A plain string key-value store that survives app restarts on one install.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """String key-value persistence"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Read a value, None when absent"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Write a value"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a value if present"""
