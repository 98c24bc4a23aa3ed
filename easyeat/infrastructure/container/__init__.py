"""
Dependency injection container
"""

from .dependency_injection import (
    DependencyContainer,
    get_container,
    initialize_container,
    reset_container,
)

__all__ = [
    "DependencyContainer",
    "get_container",
    "initialize_container",
    "reset_container",
]
