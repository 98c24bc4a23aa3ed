# pylint: disable=too-many-instance-attributes
"""
Order domain entity

Represents a placed order, either the local optimistic copy or the copy
read back from the remote document store.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Tuple

from easyeat.domain.entities.cart_line import CartLine
from easyeat.domain.value_objects.money import DEFAULT_CURRENCY, Money


@dataclass(frozen=True)
class Order:
    """
    Order domain entity

    Immutable once placed. A status change yields a new Order; the lines
    are snapshot copies owned by this order alone.
    """

    id: str
    lines: Tuple[CartLine, ...]
    items_subtotal: Money
    delivery_fee: Money
    delivery_address: str
    status: str
    created_at: datetime
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    seller_id: str = ""
    seller_name: str = ""
    notes: str = ""
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "status", str(self.status))
        object.__setattr__(self, "created_at", _as_utc(self.created_at))
        if self.updated_at is not None:
            object.__setattr__(self, "updated_at", _as_utc(self.updated_at))

    @property
    def total(self) -> Money:
        """The only source of the displayed total"""
        return self.items_subtotal + self.delivery_fee

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def with_status(self, status: str) -> "Order":
        """Copy of this order in another status"""
        return replace(self, status=str(status), updated_at=datetime.now(UTC))

    def to_dict(self) -> Dict[str, Any]:
        """Flat record shared by durable local storage and the document store"""
        return {
            "id": self.id,
            "items": [line.to_dict() for line in self.lines],
            "subtotal": self.items_subtotal.to_float(),
            "delivery_fee": self.delivery_fee.to_float(),
            "total": self.total.to_float(),
            "currency": self.items_subtotal.currency,
            "address": self.delivery_address,
            "status": self.status,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "seller_id": self.seller_id,
            "seller_name": self.seller_name,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        """Create Order from a stored record. A stored total is ignored."""
        currency = data.get("currency") or DEFAULT_CURRENCY
        return cls(
            id=str(data["id"]),
            lines=tuple(
                CartLine.from_dict(item, currency) for item in data.get("items") or []
            ),
            items_subtotal=Money.from_float(data.get("subtotal", 0.0), currency),
            delivery_fee=Money.from_float(data.get("delivery_fee", 0.0), currency),
            delivery_address=data.get("address") or "",
            status=data["status"],
            created_at=_parse_datetime(data.get("created_at")),
            customer_id=data.get("customer_id"),
            customer_name=data.get("customer_name"),
            seller_id=data.get("seller_id") or "",
            seller_name=data.get("seller_name") or "",
            notes=data.get("notes") or "",
            updated_at=(
                _parse_datetime(data["updated_at"]) if data.get("updated_at") else None
            ),
        )


def _parse_datetime(value: Any) -> datetime:
    if value is None:
        return datetime.now(UTC)
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps come back from the document store in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
