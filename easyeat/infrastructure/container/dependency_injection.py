"""
Dependency Injection Container

Manages the instantiation and lifecycle of dependencies for Clean Architecture.
Per-session stores are rebuilt whenever the signed-in user changes.
"""

import logging
from typing import Any, Dict, Optional

from ...application.use_cases.cart_store import CartStore
from ...application.use_cases.checkout_use_case import CheckoutUseCase
from ...application.use_cases.chef_order_queue import ChefOrderQueue
from ...application.use_cases.order_history_store import OrderHistoryStore
from ...domain.repositories.local_storage import KeyValueStorage
from ...domain.repositories.order_repository import OrderRepository
from ...domain.value_objects.money import Money
from ...domain.value_objects.user_session import UserSession
from ..auth.session_manager import SessionManager
from ..configuration.config import Settings, get_config
from ..database.operations import DatabaseManager
from ..logging.logging_config import get_structured_logger
from ..repositories.sqlalchemy_order_repository import SQLAlchemyOrderRepository
from ..storage.json_file_storage import JsonFileStorage

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container for Clean Architecture

    Manages the instantiation and lifecycle of:
    - Repositories and storage (Infrastructure layer)
    - Session-scoped stores and use cases (Application layer)
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        database_manager: Optional[DatabaseManager] = None,
        local_storage: Optional[KeyValueStorage] = None,
    ):
        self._config = config or get_config()
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self._events = get_structured_logger(self.__class__.__name__)
        self._setup_dependencies(database_manager, local_storage)

    def _setup_dependencies(
        self,
        database_manager: Optional[DatabaseManager],
        local_storage: Optional[KeyValueStorage],
    ):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        # Infrastructure Layer
        self._register_infrastructure(database_manager, local_storage)

        # Application Layer - session-scoped stores
        self._register_session_stores()

        self._logger.info("Dependency injection container setup complete")

    def _register_infrastructure(
        self,
        database_manager: Optional[DatabaseManager],
        local_storage: Optional[KeyValueStorage],
    ):
        """Register repository, storage and identity implementations"""
        database_manager = database_manager or DatabaseManager(config=self._config)
        self._instances["database_manager"] = database_manager
        self._instances["order_repository"] = SQLAlchemyOrderRepository(database_manager)
        self._instances["local_storage"] = local_storage or JsonFileStorage(
            self._config.local_storage_path
        )
        self._instances["session_manager"] = SessionManager()

        self._logger.debug("Infrastructure registered successfully")

    def _register_session_stores(self):
        """Register fresh stores for the current session"""
        delivery_fee = Money.from_float(self._config.delivery_fee, self._config.currency)

        self._instances["cart_store"] = CartStore(currency=self._config.currency)

        self._instances["order_history_store"] = OrderHistoryStore(
            order_repository=self.get_order_repository(),
            local_storage=self.get_local_storage(),
            session_accessor=self.get_session_manager().current_session,
            delivery_fee=delivery_fee,
            auto_delivery_enabled=self._config.auto_delivery_enabled,
            auto_delivery_delay_seconds=self._config.auto_delivery_delay_seconds,
            refresh_interval_seconds=self._config.order_refresh_interval_seconds,
        )

        self._instances["checkout_use_case"] = CheckoutUseCase(
            order_history_store=self.get_order_history_store(),
            delivery_fee=delivery_fee,
        )

        self._instances["chef_order_queue"] = ChefOrderQueue(
            order_repository=self.get_order_repository()
        )

        self._logger.debug("Session stores registered successfully")

    async def _teardown_session_stores(self):
        """Let pending remote writes finish, then stop the history store"""
        store: Optional[OrderHistoryStore] = self._instances.pop(
            "order_history_store", None
        )
        if store is not None:
            await store.wait_for_background_sync()
            await store.aclose()
        for key in ("cart_store", "checkout_use_case", "chef_order_queue"):
            self._instances.pop(key, None)

    # Session lifecycle

    async def sign_in(self, user_session: UserSession) -> None:
        """Start a session: fresh stores for the user and an initial refresh"""
        await self._teardown_session_stores()
        self.get_session_manager().sign_in(user_session)
        self._register_session_stores()

        self._events.info(
            "session_started",
            user_id=user_session.user_id,
            role=user_session.role.value,
        )

        await self.get_order_history_store().refresh()

    async def sign_out(self) -> None:
        """End the session; local history stays in durable storage, the cart does not"""
        session = self.get_session_manager().current_session()
        await self._teardown_session_stores()
        self.get_session_manager().sign_out()
        self._register_session_stores()

        self._events.info(
            "session_ended", user_id=session.user_id if session else None
        )

    async def shutdown(self) -> None:
        """Tear down every store and release the database engine"""
        self._logger.info("Shutting down dependency container...")
        await self._teardown_session_stores()
        database_manager = self._instances.get("database_manager")
        if database_manager is not None:
            database_manager.dispose()
        self._instances.clear()

    # Infrastructure getters
    def get_config(self) -> Settings:
        """Get the settings this container was built with"""
        return self._config

    def get_database_manager(self) -> DatabaseManager:
        """Get database manager instance"""
        return self._instances["database_manager"]

    def get_order_repository(self) -> OrderRepository:
        """Get order repository instance"""
        return self._instances["order_repository"]

    def get_local_storage(self) -> KeyValueStorage:
        """Get durable local storage instance"""
        return self._instances["local_storage"]

    def get_session_manager(self) -> SessionManager:
        """Get session manager instance"""
        return self._instances["session_manager"]

    # Store and use case getters
    def get_cart_store(self) -> CartStore:
        """Get cart store for the current session"""
        return self._instances["cart_store"]

    def get_order_history_store(self) -> OrderHistoryStore:
        """Get order history store for the current session"""
        return self._instances["order_history_store"]

    def get_checkout_use_case(self) -> CheckoutUseCase:
        """Get checkout use case instance"""
        return self._instances["checkout_use_case"]

    def get_chef_order_queue(self) -> ChefOrderQueue:
        """Get chef order queue instance"""
        return self._instances["chef_order_queue"]

    def cleanup(self):
        """Stop timers and polling without waiting on the event loop"""
        self._logger.info("Cleaning up dependency container...")
        store: Optional[OrderHistoryStore] = self._instances.get("order_history_store")
        if store is not None:
            store.stop_polling()
            store.scheduler.cancel_all()
        self._instances.clear()


# Global container instance
_container: Optional[DependencyContainer] = None


def get_container() -> DependencyContainer:
    """Get the global dependency container instance"""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def initialize_container(
    config: Optional[Settings] = None,
    database_manager: Optional[DatabaseManager] = None,
    local_storage: Optional[KeyValueStorage] = None,
) -> DependencyContainer:
    """Initialize the global dependency container"""
    global _container
    if _container:
        _container.cleanup()
    _container = DependencyContainer(
        config=config, database_manager=database_manager, local_storage=local_storage
    )
    return _container


def reset_container():
    """Reset the global container (useful for testing)"""
    global _container
    if _container:
        _container.cleanup()
    _container = None
