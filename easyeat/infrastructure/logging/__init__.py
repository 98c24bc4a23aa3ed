"""
Logging Infrastructure
"""

from .logging_config import (
    PerformanceLogger,
    ProductionLogger,
    QAEnhancedFormatter,
    get_structured_logger,
)

__all__ = [
    "PerformanceLogger",
    "ProductionLogger",
    "QAEnhancedFormatter",
    "get_structured_logger",
]
