"""
Cart store

Holds the customer's in-progress selection before checkout. In memory
only: the cart is not persisted across restarts.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from easyeat.application.dtos.cart_dtos import CartItemInfo, CartSummary
from easyeat.domain.entities.cart_line import CartLine, CartSnapshot
from easyeat.domain.value_objects.money import DEFAULT_CURRENCY, Money


class CartStore:
    """
    Cart store for one customer session

    Handles:
    1. Adding items (merging lines with the same item id)
    2. Changing quantities
    3. Removing items and clearing the cart
    4. Derived totals for the cart badge and checkout
    """

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self._currency = currency
        self._lines: List[CartLine] = []
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, item_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.item_id == item_id:
                return line
        return None

    def add_item(self, line: CartLine) -> None:
        """Add a line; an existing line for the same item gains the quantity"""
        line = self._in_cart_currency(line)
        for index, existing in enumerate(self._lines):
            if existing.item_id == line.item_id:
                new_quantity = existing.quantity + line.quantity
                self._lines[index] = existing.with_quantity(new_quantity)
                self._logger.info(
                    "🛒 CART: %s quantity %d → %d",
                    line.item_id,
                    existing.quantity,
                    new_quantity,
                )
                return

        self._lines.append(line)
        self._logger.info(
            "🛒 CART: Added %s x%d from seller %s",
            line.item_id,
            line.quantity,
            line.seller_id or "-",
        )

    def _in_cart_currency(self, line: CartLine) -> CartLine:
        # Menu prices carry no currency of their own; the cart's currency applies
        if line.unit_price.currency == self._currency:
            return line
        self._logger.debug(
            "🛒 CART: %s priced in %s, using %s",
            line.item_id,
            line.unit_price.currency,
            self._currency,
        )
        return replace(line, unit_price=Money(line.unit_price.amount, self._currency))

    def set_quantity(self, item_id: str, new_quantity: int) -> None:
        """Replace a line's quantity; zero or below removes the line"""
        if new_quantity <= 0:
            self.remove_item(item_id)
            return

        for index, existing in enumerate(self._lines):
            if existing.item_id == item_id:
                self._lines[index] = existing.with_quantity(new_quantity)
                self._logger.info("🛒 CART: %s quantity set to %d", item_id, new_quantity)
                return

        self._logger.debug("🛒 CART: set_quantity ignored, %s not in cart", item_id)

    def remove_item(self, item_id: str) -> None:
        remaining = [line for line in self._lines if line.item_id != item_id]
        if len(remaining) != len(self._lines):
            self._lines = remaining
            self._logger.info("🗑️ CART: Removed %s", item_id)

    def clear(self) -> None:
        self._lines = []
        self._logger.info("🗑️ CART CLEARED")

    def total_amount(self) -> Money:
        """Sum of unit_price * quantity, recomputed on every call"""
        total = Money.zero(self._currency)
        for line in self._lines:
            total = total + line.line_total
        return total

    def item_count(self) -> int:
        """Sum of quantities, for the cart badge"""
        return sum(line.quantity for line in self._lines)

    def snapshot(self) -> CartSnapshot:
        """Frozen copy of the current lines for checkout"""
        return CartSnapshot(lines=tuple(self._lines), currency=self._currency)

    def summary(self, delivery_fee: Money) -> CartSummary:
        """Checkout preview: lines, subtotal, delivery fee and total"""
        subtotal = self.total_amount()
        return CartSummary(
            items=[
                CartItemInfo(
                    item_id=line.item_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price.to_float(),
                    total_price=line.line_total.to_float(),
                    seller_name=line.seller_name,
                    image_ref=line.image_ref,
                )
                for line in self._lines
            ],
            subtotal=subtotal.to_float(),
            delivery_fee=delivery_fee.to_float(),
            total=(subtotal + delivery_fee).to_float(),
            item_count=self.item_count(),
            currency=self._currency,
        )
