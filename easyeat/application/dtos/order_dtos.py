"""
Order DTOs

Data Transfer Objects for order-related operations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from easyeat.domain.entities.order_entity import Order


@dataclass
class OrderItemInfo:
    """Order item information"""

    item_id: str
    name: str
    quantity: int
    unit_price: float
    total_price: float
    image_ref: Optional[str] = None
    seller_id: str = ""
    seller_name: str = ""


@dataclass
class OrderInfo:
    """Order as shown to the customer: one shape for local and remote orders"""

    order_id: str
    items: List[OrderItemInfo]
    subtotal: float
    delivery_fee: float
    total: float
    currency: str
    delivery_address: str
    status: str
    created_at: datetime
    seller_id: str = ""
    seller_name: str = ""
    customer_name: Optional[str] = None
    source: str = "local"  # 'local' or 'remote'

    @classmethod
    def from_order(cls, order: Order, status: str, source: str) -> "OrderInfo":
        """Create OrderInfo from an Order; status is the already-mapped display status"""
        return cls(
            order_id=order.id,
            items=[
                OrderItemInfo(
                    item_id=line.item_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price.to_float(),
                    total_price=line.line_total.to_float(),
                    image_ref=line.image_ref,
                    # Remote lines may lack seller info; fall back to the order's
                    seller_id=line.seller_id or order.seller_id,
                    seller_name=line.seller_name or order.seller_name,
                )
                for line in order.lines
            ],
            subtotal=order.items_subtotal.to_float(),
            delivery_fee=order.delivery_fee.to_float(),
            total=order.total.to_float(),
            currency=order.items_subtotal.currency,
            delivery_address=order.delivery_address,
            status=str(status),
            created_at=order.created_at,
            seller_id=order.seller_id,
            seller_name=order.seller_name,
            customer_name=order.customer_name,
            source=source,
        )


@dataclass
class OrderCreationResponse:
    """Response from checkout"""

    success: bool
    order_info: Optional[OrderInfo] = None
    error_message: Optional[str] = None
