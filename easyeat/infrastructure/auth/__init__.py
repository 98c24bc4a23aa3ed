"""
Identity provider adapters
"""

from .session_manager import SessionManager

__all__ = ["SessionManager"]
