"""
Demo entry point tests
"""

import pytest

from easyeat.infrastructure.configuration.config import get_config
from easyeat.infrastructure.container.dependency_injection import DependencyContainer
from main import DEMO_CHEF, run_demo


class TestRunDemo:
    """Test the end-to-end demo scenario"""

    @pytest.mark.asyncio
    async def test_demo_places_and_tracks_one_order(self, database_manager, local_storage):
        container = DependencyContainer(
            config=get_config(),
            database_manager=database_manager,
            local_storage=local_storage,
        )

        try:
            display = await run_demo(container)

            assert len(display) == 1
            info = display[0]
            assert info.source == "remote"
            assert info.status == "in-progress"
            assert info.subtotal == 34.47
            assert info.total == 36.47
            assert info.seller_id == DEMO_CHEF.user_id

            orders = await container.get_chef_order_queue().list_orders(DEMO_CHEF.user_id)
            assert [order.status for order in orders] == ["preparing"]
            assert container.get_cart_store().is_empty
        finally:
            await container.shutdown()
