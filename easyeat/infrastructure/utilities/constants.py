"""
Application constants for the EasyEat ordering core

Centralizes all magic numbers and hard-coded values that are not
environment-tunable.
"""

from typing import Final


# Business rules
class BusinessSettings:
    """Checkout, order lifecycle and history settings"""

    DEFAULT_CURRENCY: Final[str] = "USD"
    DEFAULT_DELIVERY_FEE: Final[float] = 2.00
    AUTO_DELIVERY_DELAY_SECONDS: Final[float] = 60.0
    ORDER_REFRESH_INTERVAL_SECONDS: Final[float] = 10.0
    MAX_DELIVERY_ADDRESS_LENGTH: Final[int] = 500

    # Durable local storage key for the local order list
    LOCAL_ORDER_HISTORY_KEY: Final[str] = "order_history"


# Database configuration constants
class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour
    CONNECTION_TIMEOUT_SECONDS: Final[int] = 30

    # Production settings
    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30

    # Development settings
    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10


# Logging configuration constants
class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10


# Log file names
class FileSettings:
    """Log file names inside the configured log directory"""

    MAIN_LOG_FILE: Final[str] = "easyeat.json.log"
    ERROR_LOG_FILE: Final[str] = "errors.json.log"


# Performance monitoring constants
class PerformanceSettings:
    """Performance thresholds"""

    SLOW_QUERY_THRESHOLD_MS: Final[int] = 1000
