"""
Cart store tests
"""

from decimal import Decimal

from easyeat.application.use_cases.cart_store import CartStore
from easyeat.domain.value_objects.money import Money
from factories import make_line


class TestCartStore:
    """Test cart mutations and derived totals"""

    def test_adding_same_item_merges_lines(self):
        """Test one line per item id with summed quantity"""
        cart = CartStore()
        cart.add_item(make_line("m1", 10.99, 1))
        cart.add_item(make_line("m1", 10.99, 2))

        assert len(cart.lines) == 1
        assert cart.get_line("m1").quantity == 3
        assert cart.total_amount() == Money(Decimal("32.97"))
        assert cart.total_amount().to_float() == 32.97

    def test_many_adds_sum_quantities(self):
        cart = CartStore()
        for quantity in (1, 4, 2, 7):
            cart.add_item(make_line("m1", quantity=quantity))
        cart.add_item(make_line("m2", quantity=1))

        assert [line.item_id for line in cart.lines] == ["m1", "m2"]
        assert cart.get_line("m1").quantity == 14
        assert cart.item_count() == 15

    def test_set_quantity_replaces(self):
        cart = CartStore()
        cart.add_item(make_line("m1", quantity=2))
        cart.set_quantity("m1", 5)
        assert cart.get_line("m1").quantity == 5

    def test_set_quantity_zero_removes_line(self):
        """Test setQuantity(id, 0) is equivalent to removeItem(id)"""
        cart = CartStore()
        cart.add_item(make_line("m1"))
        cart.add_item(make_line("m2"))

        cart.set_quantity("m1", 0)
        cart.set_quantity("m2", -3)

        assert cart.is_empty
        assert cart.get_line("m1") is None

    def test_set_quantity_for_absent_item_is_noop(self):
        cart = CartStore()
        cart.add_item(make_line("m1"))
        cart.set_quantity("missing", 4)
        assert cart.item_count() == 1

    def test_remove_absent_item_is_noop(self):
        cart = CartStore()
        cart.add_item(make_line("m1"))
        cart.remove_item("missing")
        assert len(cart.lines) == 1

    def test_add_then_remove_restores_total(self):
        """Test idempotence under add/remove pairs"""
        cart = CartStore()
        cart.add_item(make_line("m1", 10.99, 2))
        before = cart.total_amount()

        cart.add_item(make_line("m2", 3.25, 4))
        cart.remove_item("m2")

        assert cart.total_amount() == before

    def test_total_matches_sum_of_lines(self):
        cart = CartStore()
        cart.add_item(make_line("m1", 0.10, 3))
        cart.add_item(make_line("m2", 0.20, 1))
        cart.add_item(make_line("m3", 19.99, 2))
        assert cart.total_amount() == Money(Decimal("40.48"))

    def test_clear(self):
        cart = CartStore()
        cart.add_item(make_line("m1", quantity=3))
        cart.clear()
        assert cart.is_empty
        assert cart.item_count() == 0
        assert cart.total_amount().is_zero()

    def test_snapshot_is_unaffected_by_later_changes(self):
        """Test a snapshot owns its lines"""
        cart = CartStore()
        cart.add_item(make_line("m1", quantity=1))
        snapshot = cart.snapshot()

        cart.add_item(make_line("m1", quantity=5))
        cart.add_item(make_line("m2"))

        assert len(snapshot.lines) == 1
        assert snapshot.lines[0].quantity == 1

    def test_summary(self):
        cart = CartStore()
        cart.add_item(make_line("m1", 10.99, 3))
        summary = cart.summary(Money.from_float(2.0))

        assert summary.subtotal == 32.97
        assert summary.delivery_fee == 2.0
        assert summary.total == 34.97
        assert summary.item_count == 3
        assert summary.items[0].total_price == 32.97
        assert summary.items[0].seller_name == "Chef Amir"

    def test_lines_take_the_cart_currency(self):
        """Test number-priced lines total in a non-default currency"""
        cart = CartStore(currency="EUR")
        cart.add_item(make_line("m1", 10.99, 1))
        cart.add_item(make_line("m1", 10.99, 2))

        assert cart.get_line("m1").unit_price == Money(Decimal("10.99"), "EUR")
        assert cart.total_amount() == Money(Decimal("32.97"), "EUR")
        assert cart.snapshot().items_subtotal == Money(Decimal("32.97"), "EUR")

        summary = cart.summary(Money.from_float(2.0, "EUR"))
        assert summary.total == 34.97
        assert summary.currency == "EUR"
