"""
Cart DTOs

Data Transfer Objects for cart-related operations.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CartItemInfo:
    """Cart item information"""
    item_id: str
    name: str
    quantity: int
    unit_price: float
    total_price: float
    seller_name: str = ""
    image_ref: Optional[str] = None


@dataclass
class CartSummary:
    """Cart summary information"""
    items: List[CartItemInfo] = field(default_factory=list)
    subtotal: float = 0.0
    delivery_fee: float = 0.0
    total: float = 0.0
    item_count: int = 0
    currency: str = "USD"
