"""Order ID value object"""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderId:
    """Order identifier value object

    Generated on the client so the local copy and the remote copy of one
    order share the same key.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Order ID must be a non-empty string")
        object.__setattr__(self, "value", self.value.strip())

    @classmethod
    def generate(cls) -> "OrderId":
        """Create a new unique order id"""
        return cls(uuid.uuid4().hex)

    def __str__(self) -> str:
        return self.value
