"""
Infrastructure Layer Tests - configuration, logging, storage, persistence
"""

import asyncio
import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError as SettingsValidationError
from sqlalchemy.exc import SQLAlchemyError

from easyeat.application.services.auto_delivery_scheduler import AutoDeliveryScheduler
from easyeat.domain.value_objects.order_id import OrderId
from easyeat.infrastructure.auth.session_manager import SessionManager
from easyeat.infrastructure.configuration.config import Settings, get_config, reset_config
from easyeat.infrastructure.database.operations import DatabaseManager
from easyeat.infrastructure.logging.logging_config import (
    PerformanceLogger,
    ProductionLogger,
    get_structured_logger,
)
from easyeat.infrastructure.storage.json_file_storage import JsonFileStorage
from easyeat.infrastructure.utilities.exceptions import (
    RemoteQueryError,
    RemoteUnavailableError,
)
from factories import make_order_record


class TestConfiguration:
    """Test settings loading"""

    def test_defaults(self, mock_env):
        config = get_config()
        assert config.environment == "test"
        assert config.database_url == "sqlite:///:memory:"
        assert config.currency == "USD"
        assert config.delivery_fee == 2.0
        assert config.auto_delivery_enabled is True
        assert config.auto_delivery_delay_seconds == 60.0
        assert config.order_refresh_interval_seconds == 10.0

    def test_singleton_and_reset(self, monkeypatch):
        first = get_config()
        assert get_config() is first

        monkeypatch.setenv("DELIVERY_FEE", "3.5")
        assert get_config().delivery_fee == 2.0

        reset_config()
        assert get_config().delivery_fee == 3.5

    def test_invalid_values_rejected(self, monkeypatch):
        monkeypatch.setenv("AUTO_DELIVERY_DELAY_SECONDS", "0")
        with pytest.raises(SettingsValidationError):
            Settings()

        monkeypatch.setenv("AUTO_DELIVERY_DELAY_SECONDS", "60")
        monkeypatch.setenv("DELIVERY_FEE", "-1")
        with pytest.raises(SettingsValidationError):
            Settings()


class TestLogging:
    """Test logging setup"""

    def test_setup_logging_writes_json_files(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
        reset_config()
        root_logger = logging.getLogger()
        saved_handlers = list(root_logger.handlers)
        saved_level = root_logger.level

        try:
            ProductionLogger.setup_logging()
            logging.getLogger("easyeat.test").error("boom")
            for handler in root_logger.handlers:
                handler.flush()

            error_log = tmp_path / "logs" / "errors.json.log"
            lines = error_log.read_text(encoding="utf-8").strip().splitlines()
            record = json.loads(lines[-1])
            assert record["message"] == "boom"
            assert record["level"] == "ERROR"
            assert record["logger"] == "easyeat.test"
            assert (tmp_path / "logs" / "easyeat.json.log").exists()
        finally:
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)

    def test_performance_logger_reports_failures(self, caplog):
        logger = logging.getLogger("perf")
        with caplog.at_level(logging.DEBUG, logger="perf"):
            with pytest.raises(ValueError):
                with PerformanceLogger("orders.test", logger):
                    raise ValueError("bad")

        assert "Failed operation: orders.test" in caplog.text

    def test_performance_logger_times_success(self):
        with PerformanceLogger("orders.quick") as perf:
            pass
        assert perf.duration_ms >= 0

    def test_structured_logger(self):
        assert get_structured_logger("easyeat.test") is not None


class TestJsonFileStorage:
    """Test durable local storage"""

    def test_set_get_remove(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "nested" / "store.json")
        assert storage.get_item("k") is None

        storage.set_item("k", "v")
        storage.set_item("other", "w")
        assert storage.get_item("k") == "v"

        storage.remove_item("k")
        storage.remove_item("k")
        assert storage.get_item("k") is None
        assert storage.get_item("other") == "w"

    def test_survives_new_instance(self, tmp_path):
        JsonFileStorage(tmp_path / "store.json").set_item("k", "v")
        assert JsonFileStorage(tmp_path / "store.json").get_item("k") == "v"

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{broken", encoding="utf-8")
        storage = JsonFileStorage(path)

        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"


class TestSessionManager:
    """Test the current-session accessor"""

    def test_sign_in_and_out(self, customer_session):
        manager = SessionManager()
        assert manager.current_session() is None
        assert not manager.is_authenticated

        manager.sign_in(customer_session)
        assert manager.current_session() is customer_session
        assert manager.is_authenticated

        manager.sign_out()
        assert manager.current_session() is None


class TestDatabaseManager:
    """Test engine setup"""

    def test_file_database_directory_is_created(self, tmp_path):
        manager = DatabaseManager(database_url=f"sqlite:///{tmp_path}/db/orders.db")
        manager.init_db()
        assert (tmp_path / "db" / "orders.db").exists()
        manager.dispose()

    def test_managed_session_rolls_back(self, database_manager):
        with pytest.raises(SQLAlchemyError):
            with database_manager.managed_session() as session:
                raise SQLAlchemyError("boom")
        assert session is not None


class TestSQLAlchemyOrderRepository:
    """Test the document store implementation"""

    @pytest.mark.asyncio
    async def test_create_assigns_timestamp(self, order_repository):
        created = await order_repository.create_order(make_order_record("o1"))
        assert created["id"] == "o1"
        assert created["created_at"] is not None
        assert created["items"][0]["item_id"] == "m1"

    @pytest.mark.asyncio
    async def test_queries_by_customer_and_seller(self, order_repository):
        await order_repository.create_order(make_order_record("o1", customer_id="c1"))
        await order_repository.create_order(
            make_order_record("o2", customer_id="c2", seller_id="chef-2")
        )

        by_customer = await order_repository.get_orders_by_customer("c1")
        by_seller = await order_repository.get_orders_by_seller("chef-2", ordered=False)

        assert [record["id"] for record in by_customer] == ["o1"]
        assert [record["id"] for record in by_seller] == ["o2"]

    @pytest.mark.asyncio
    async def test_update_status(self, order_repository):
        await order_repository.create_order(make_order_record("o1"))

        assert await order_repository.update_order_status(OrderId("o1"), "preparing")
        assert not await order_repository.update_order_status(OrderId("nope"), "preparing")
        record = await order_repository.get_order_by_id(OrderId("o1"))
        assert record["status"] == "preparing"

    @pytest.mark.asyncio
    async def test_get_missing(self, order_repository):
        assert await order_repository.get_order_by_id(OrderId("nope")) is None

    @pytest.mark.asyncio
    async def test_database_errors_are_translated(self, order_repository, database_manager):
        with patch.object(
            database_manager, "managed_session", side_effect=SQLAlchemyError("down")
        ):
            with pytest.raises(RemoteUnavailableError) as exc_info:
                await order_repository.get_orders_by_customer("c1")
            assert not isinstance(exc_info.value, RemoteQueryError)
            assert exc_info.value.operation == "get_orders_by_customer"

            with pytest.raises(RemoteQueryError):
                await order_repository.get_orders_by_seller("chef-1")

            with pytest.raises(RemoteUnavailableError) as exc_info:
                await order_repository.get_orders_by_seller("chef-1", ordered=False)
            assert not isinstance(exc_info.value, RemoteQueryError)

            with pytest.raises(RemoteUnavailableError):
                await order_repository.create_order(make_order_record("o1"))


class TestAutoDeliveryScheduler:
    """Test cancellable per-order timers"""

    @pytest.mark.asyncio
    async def test_fires_once(self):
        fired = []
        scheduler = AutoDeliveryScheduler(0.01, fired.append)

        scheduler.schedule("o1")
        assert scheduler.is_scheduled("o1")
        await asyncio.sleep(0.05)

        assert fired == ["o1"]
        assert not scheduler.is_scheduled("o1")

    @pytest.mark.asyncio
    async def test_cancelled_timer_never_fires(self):
        fired = []
        scheduler = AutoDeliveryScheduler(0.01, fired.append)

        scheduler.schedule("o1")
        scheduler.schedule("o2")
        assert scheduler.cancel("o1") is True
        assert scheduler.cancel("o1") is False
        await asyncio.sleep(0.05)

        assert fired == ["o2"]

    @pytest.mark.asyncio
    async def test_reschedule_replaces_timer(self):
        fired = []
        scheduler = AutoDeliveryScheduler(0.01, fired.append)

        scheduler.schedule("o1")
        scheduler.schedule("o1")
        await asyncio.sleep(0.05)

        assert fired == ["o1"]

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        fired = []
        scheduler = AutoDeliveryScheduler(0.01, fired.append)
        scheduler.schedule("o1")
        scheduler.schedule("o2")

        scheduler.cancel_all()
        await asyncio.sleep(0.05)

        assert fired == []
        assert scheduler.pending_order_ids == ()

    @pytest.mark.asyncio
    async def test_callback_errors_are_contained(self, caplog):
        def explode(order_id):
            raise RuntimeError(order_id)

        scheduler = AutoDeliveryScheduler(0.01, explode)
        scheduler.schedule("o1")
        await asyncio.sleep(0.05)

        assert "AUTO DELIVERY callback failed for o1" in caplog.text
