"""
Logging configuration for the EasyEat ordering core

Provides console output for development, rotating JSON logs for analysis,
structlog configuration for lifecycle events and a timing context manager.
"""

import logging
import logging.handlers
import os
import sys
import threading
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger.json import JsonFormatter

from easyeat.infrastructure.configuration.config import Settings, get_config
from easyeat.infrastructure.utilities.constants import (
    FileSettings,
    LoggingSettings,
    PerformanceSettings,
)


class ProductionLogger:
    """Production-ready logging configuration"""

    @staticmethod
    def setup_logging(config: Optional[Settings] = None):
        """
        Setup logging for the application

        Features:
        - Console output outside production
        - Structured JSON application and error logs
        - structlog routed through the standard library
        """
        config = config or get_config()

        logs_dir = Path(config.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.log_level.upper()))

        # Clear existing handlers
        root_logger.handlers.clear()

        if config.environment != "production":
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)
            console_formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            console_handler.setFormatter(console_formatter)
            root_logger.addHandler(console_handler)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / FileSettings.MAIN_LOG_FILE,
            maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
            backupCount=LoggingSettings.MAIN_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        app_handler.setFormatter(QAEnhancedFormatter())
        app_handler.setLevel(logging.INFO)
        root_logger.addHandler(app_handler)

        # Error-only log for critical issues
        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / FileSettings.ERROR_LOG_FILE,
            maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
            backupCount=LoggingSettings.ERROR_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setFormatter(QAEnhancedFormatter())
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

        ProductionLogger._configure_structlog()
        ProductionLogger._configure_specific_loggers()

        logger = logging.getLogger(__name__)
        logger.info(
            "Logging configured successfully",
            extra={
                "environment": config.environment,
                "log_level": config.log_level,
            },
        )

    @staticmethod
    def _configure_structlog():
        """Configure structlog to render through the standard library handlers"""
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer(),
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def _configure_specific_loggers():
        """Configure specific loggers for different components"""
        # SQLAlchemy logging for database monitoring
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


class QAEnhancedFormatter(JsonFormatter):
    """JSON formatter with process, thread and timing fields"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # Thread info for debugging
        log_record["thread_id"] = threading.current_thread().ident
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        if hasattr(record, "user_id"):
            log_record["user_id"] = record.user_id

        if hasattr(record, "operation_time"):
            log_record["operation_time_ms"] = record.operation_time


class PerformanceLogger:
    """Context manager for performance logging"""

    def __init__(
        self,
        operation_name: str,
        logger: Optional[logging.Logger] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(__name__)
        self.details = details or {}
        self.start_time = 0.0
        self.duration_ms = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Starting operation: %s",
            self.operation_name,
            extra={"operation": self.operation_name, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.warning(
                "Failed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": False,
                    "error_type": exc_type.__name__,
                    **self.details,
                },
            )
        elif self.duration_ms > PerformanceSettings.SLOW_QUERY_THRESHOLD_MS:
            self.logger.warning(
                "Slow operation: %s took %.0fms",
                self.operation_name,
                self.duration_ms,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    **self.details,
                },
            )
        else:
            self.logger.debug(
                "Completed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": True,
                    **self.details,
                },
            )
        return False


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)
