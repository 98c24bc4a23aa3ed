"""
Database engine and session management for the remote order store
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from sqlalchemy import Engine, create_engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from easyeat.infrastructure.configuration.config import get_config
from easyeat.infrastructure.database.models import Base
from easyeat.infrastructure.utilities.constants import DatabaseSettings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the engine and hands out sessions"""

    def __init__(self, config: Optional[Any] = None, database_url: Optional[str] = None):
        """Initialize database manager with configuration"""
        self.config = config or get_config()
        self.database_url = database_url or self.config.database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_engine(self) -> Engine:
        """Get database engine with proper configuration"""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with environment-specific settings"""
        engine_kwargs: dict[str, Any] = {
            "echo": False,
            "pool_pre_ping": True,
        }

        if self.database_url.startswith("sqlite"):
            self._ensure_sqlite_directory()
            # One shared connection so in-memory databases survive across sessions
            engine_kwargs.update(
                {
                    "poolclass": StaticPool,
                    "connect_args": {
                        "check_same_thread": False,
                        "timeout": DatabaseSettings.CONNECTION_TIMEOUT_SECONDS,
                    },
                }
            )
        else:
            if self.config.environment == "production":
                pool_size = DatabaseSettings.PRODUCTION_POOL_SIZE
                max_overflow = DatabaseSettings.PRODUCTION_MAX_OVERFLOW
            else:
                pool_size = DatabaseSettings.DEVELOPMENT_POOL_SIZE
                max_overflow = DatabaseSettings.DEVELOPMENT_MAX_OVERFLOW
            engine_kwargs.update(
                {
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_recycle": DatabaseSettings.POOL_RECYCLE_SECONDS,
                }
            )

        self.logger.info("🗄️ CREATING ENGINE: %s", self.database_url.split("://")[0])
        return create_engine(self.database_url, **engine_kwargs)

    def _ensure_sqlite_directory(self) -> None:
        path = make_url(self.database_url).database
        if path and path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)

    def get_session(self) -> Session:
        """Get a new database session"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(), expire_on_commit=False
            )
        return self._session_factory()

    @contextmanager
    def managed_session(self) -> Generator[Session, None, None]:
        """
        Context manager for handling database sessions, including commits,
        rollbacks and exception logging.

        Raises:
            SQLAlchemyError: If a database-related error occurs.
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            self.logger.error("💥 DATABASE ERROR: %s", e)
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create all tables"""
        self.logger.info("🏗️ INITIALIZING DATABASE SCHEMA")
        Base.metadata.create_all(self.get_engine())

    def dispose(self) -> None:
        """Close all pooled connections"""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
