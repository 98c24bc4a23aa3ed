"""
Cart line domain entity

One product line in a customer's cart, and the frozen snapshot of a cart
that checkout turns into an order.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union

from easyeat.domain.value_objects.money import DEFAULT_CURRENCY, Money


@dataclass(frozen=True)
class CartLine:
    """
    Cart line entity

    Immutable: quantity changes produce a new line, so a snapshot taken at
    checkout can never be altered by later cart mutations.
    """

    item_id: str
    name: str
    unit_price: Money
    quantity: int = 1
    image_ref: Optional[str] = None
    seller_id: str = ""
    seller_name: str = ""

    def __post_init__(self):
        if not isinstance(self.item_id, str) or not self.item_id.strip():
            raise ValueError("Item ID must be a non-empty string")

        if not isinstance(self.unit_price, Money):
            object.__setattr__(self, "unit_price", _to_money(self.unit_price))
        if not self.unit_price.is_positive():
            raise ValueError("Unit price must be greater than 0")

        if (
            not isinstance(self.quantity, int)
            or isinstance(self.quantity, bool)
            or self.quantity < 1
        ):
            raise ValueError("Quantity must be an integer of at least 1")

    @property
    def line_total(self) -> Money:
        """unit_price * quantity"""
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLine":
        """Copy of this line with another quantity"""
        return replace(self, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "unit_price": self.unit_price.to_float(),
            "quantity": self.quantity,
            "image_ref": self.image_ref,
            "seller_id": self.seller_id,
            "seller_name": self.seller_name,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], currency: str = DEFAULT_CURRENCY
    ) -> "CartLine":
        """Create CartLine from a stored dictionary."""
        return cls(
            item_id=str(data["item_id"]),
            name=data.get("name", ""),
            unit_price=Money.from_float(data["unit_price"], currency),
            quantity=int(data.get("quantity", 1)),
            image_ref=data.get("image_ref"),
            seller_id=data.get("seller_id") or "",
            seller_name=data.get("seller_name") or "",
        )


def _to_money(value: Union[Money, Decimal, int, float]) -> Money:
    try:
        return Money(value)
    except ArithmeticError as e:
        raise ValueError(f"Invalid unit price: {value!r}") from e


@dataclass(frozen=True)
class CartSnapshot:
    """Point-in-time copy of a cart's lines"""

    lines: Tuple[CartLine, ...] = field(default_factory=tuple)
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def items_subtotal(self) -> Money:
        """Sum of unit_price * quantity over all lines"""
        subtotal = Money.zero(self.currency)
        for line in self.lines:
            subtotal = subtotal + line.line_total
        return subtotal

    def dominant_seller(self) -> Tuple[str, str]:
        """
        Seller the order is attributed to

        The seller with the largest total quantity wins; ties go to the
        seller whose first line appears earliest in the cart.
        """
        quantities: Dict[str, int] = {}
        names: Dict[str, str] = {}
        for line in self.lines:
            quantities[line.seller_id] = quantities.get(line.seller_id, 0) + line.quantity
            names.setdefault(line.seller_id, line.seller_name)

        if not quantities:
            return "", ""

        # max() keeps the first maximal key; dicts preserve insertion order
        seller_id = max(quantities, key=quantities.get)
        return seller_id, names[seller_id]
