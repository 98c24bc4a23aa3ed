"""
Test configuration and fixtures for the EasyEat ordering core
"""

import os
from unittest.mock import patch

import pytest
import pytest_asyncio

from easyeat.application.use_cases.order_history_store import OrderHistoryStore
from easyeat.domain.value_objects.user_session import UserRole, UserSession
from easyeat.infrastructure.auth.session_manager import SessionManager
from easyeat.infrastructure.configuration.config import reset_config
from easyeat.infrastructure.container.dependency_injection import reset_container
from easyeat.infrastructure.database.operations import DatabaseManager
from easyeat.infrastructure.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from easyeat.infrastructure.storage.json_file_storage import JsonFileStorage


# Mock environment variables for testing
@pytest.fixture(autouse=True)
def mock_env(tmp_path):
    """Pin environment variables and drop cached singletons around each test"""
    test_env = {
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(tmp_path / "logs"),
        "DATABASE_URL": "sqlite:///:memory:",
        "LOCAL_STORAGE_PATH": str(tmp_path / "local_storage.json"),
    }

    with patch.dict(os.environ, test_env, clear=True):
        reset_config()
        reset_container()
        yield test_env
        reset_container()
        reset_config()


@pytest.fixture
def database_manager():
    """In-memory SQLite standing in for the remote document store"""
    manager = DatabaseManager(database_url="sqlite:///:memory:")
    manager.init_db()
    yield manager
    manager.dispose()


@pytest.fixture
def order_repository(database_manager):
    return SQLAlchemyOrderRepository(database_manager)


@pytest.fixture
def local_storage(tmp_path):
    return JsonFileStorage(tmp_path / "storage.json")


@pytest.fixture
def customer_session():
    return UserSession("customer-1", "Dana")


@pytest.fixture
def chef_session():
    return UserSession("chef-1", "Chef Amir", UserRole.CHEF)


@pytest.fixture
def session_manager():
    return SessionManager()


@pytest.fixture
def signed_in(session_manager, customer_session):
    session_manager.sign_in(customer_session)
    return session_manager


@pytest_asyncio.fixture
async def history_store(order_repository, local_storage, signed_in):
    """Signed-in history store on the in-memory backend, short auto-delivery delay"""
    store = OrderHistoryStore(
        order_repository=order_repository,
        local_storage=local_storage,
        session_accessor=signed_in.current_session,
        auto_delivery_delay_seconds=0.05,
    )
    yield store
    await store.aclose()
