"""
Chef order queue tests
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from easyeat.application.use_cases.chef_order_queue import ChefOrderQueue
from easyeat.domain.value_objects.order_id import OrderId
from easyeat.domain.value_objects.order_status import OrderStatus
from easyeat.infrastructure.utilities.exceptions import (
    OrderNotFoundError,
    RemoteQueryError,
    RemoteUnavailableError,
    TransitionError,
)
from factories import make_order_record, utc


class TestListOrders:
    """Test listing a seller's orders"""

    @pytest.mark.asyncio
    async def test_filters_by_seller(self, order_repository):
        await order_repository.create_order(make_order_record("o1", seller_id="chef-1"))
        await order_repository.create_order(make_order_record("o2", seller_id="chef-2"))
        await order_repository.create_order(make_order_record("o3", seller_id="chef-1"))

        orders = await ChefOrderQueue(order_repository).list_orders("chef-1")

        assert sorted(order.id for order in orders) == ["o1", "o3"]

    @pytest.mark.asyncio
    async def test_empty_seller_id(self):
        repository = MagicMock()
        repository.get_orders_by_seller = AsyncMock()

        assert await ChefOrderQueue(repository).list_orders("") == []
        repository.get_orders_by_seller.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fallback_sorts_locally(self):
        """Test a rejected ordered query falls back to an unordered one"""
        records = [
            make_order_record("old", created_at=utc(2024, 1, 1)),
            make_order_record("newest", created_at=utc(2024, 3, 1)),
            make_order_record("middle", created_at=utc(2024, 2, 1)),
        ]
        repository = MagicMock()
        repository.get_orders_by_seller = AsyncMock(
            side_effect=[RemoteQueryError("missing index"), records]
        )

        orders = await ChefOrderQueue(repository).list_orders("chef-1")

        assert [order.id for order in orders] == ["newest", "middle", "old"]
        assert repository.get_orders_by_seller.await_args_list[1].kwargs == {
            "ordered": False
        }

    @pytest.mark.asyncio
    async def test_fallback_failure_propagates(self):
        repository = MagicMock()
        repository.get_orders_by_seller = AsyncMock(
            side_effect=[RemoteQueryError("missing index"), RemoteUnavailableError("down")]
        )

        with pytest.raises(RemoteUnavailableError):
            await ChefOrderQueue(repository).list_orders("chef-1")

    @pytest.mark.asyncio
    async def test_legacy_statuses_are_normalised(self):
        repository = MagicMock()
        repository.get_orders_by_seller = AsyncMock(
            return_value=[
                make_order_record("o1", status="pending"),
                make_order_record("o2", status="delivered"),
                make_order_record("o3", status="teleported"),
            ]
        )

        orders = await ChefOrderQueue(repository).list_orders("chef-1")

        assert [(order.id, order.status) for order in orders] == [
            ("o1", "new"),
            ("o2", "completed"),
        ]


class TestAdvance:
    """Test chef status changes"""

    @pytest.mark.asyncio
    async def test_new_to_preparing(self, order_repository):
        await order_repository.create_order(make_order_record("o1"))
        queue = ChefOrderQueue(order_repository)

        updated = await queue.advance("o1", "preparing")

        assert updated.status == "preparing"
        listed = await queue.list_orders("chef-1")
        assert [(order.id, order.status) for order in listed] == [("o1", "preparing")]

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, order_repository):
        await order_repository.create_order(make_order_record("o1"))
        queue = ChefOrderQueue(order_repository)

        for target in (OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.COMPLETED):
            await queue.advance("o1", target)

        record = await order_repository.get_order_by_id(OrderId("o1"))
        assert record["status"] == "completed"

    @pytest.mark.asyncio
    async def test_invalid_transition_is_not_written(self, order_repository):
        await order_repository.create_order(make_order_record("o1", status="completed"))
        queue = ChefOrderQueue(order_repository)

        with pytest.raises(TransitionError) as exc_info:
            await queue.advance("o1", "preparing")

        assert exc_info.value.current_status == "completed"
        assert exc_info.value.requested_status == "preparing"
        record = await order_repository.get_order_by_id(OrderId("o1"))
        assert record["status"] == "completed"

    @pytest.mark.asyncio
    async def test_cancel_from_new(self, order_repository):
        await order_repository.create_order(make_order_record("o1"))
        updated = await ChefOrderQueue(order_repository).advance("o1", "cancelled")
        assert updated.status == "cancelled"

    @pytest.mark.asyncio
    async def test_missing_order(self, order_repository):
        with pytest.raises(OrderNotFoundError):
            await ChefOrderQueue(order_repository).advance("missing", "preparing")

    @pytest.mark.asyncio
    async def test_available_actions(self, order_repository):
        await order_repository.create_order(make_order_record("o1", status="preparing"))
        queue = ChefOrderQueue(order_repository)

        order = await queue.get_order("o1")

        assert queue.available_actions(order) == [OrderStatus.READY, OrderStatus.CANCELLED]
