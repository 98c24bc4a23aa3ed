"""
Custom exceptions and error handling for the EasyEat ordering core
"""

from typing import Optional


class EasyEatError(Exception):
    """Base exception for the EasyEat ordering core"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or "GENERAL_ERROR"


class ValidationError(EasyEatError):
    """Input validation errors (empty cart, empty address)"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, "VALIDATION_ERROR"  # Validation errors are user-friendly
        )
        self.field = field


class TransitionError(EasyEatError):
    """An order status change that the state machine does not allow"""

    def __init__(self, current_status: Optional[str], requested_status: Optional[str]):
        super().__init__(
            f"Invalid status transition: {current_status} → {requested_status}",
            f"This order cannot be moved from {current_status} to {requested_status}.",
            "TRANSITION_ERROR",
        )
        self.current_status = current_status
        self.requested_status = requested_status


class OrderNotFoundError(EasyEatError):
    """Order not found"""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order not found: {order_id}",
            f"Order #{order_id} not found.",
            "ORDER_NOT_FOUND",
        )
        self.order_id = order_id


class RemoteUnavailableError(EasyEatError):
    """Backend communication failures. Soft on background paths."""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            "Sorry, we couldn't reach the server. Showing the latest saved data.",
            "REMOTE_UNAVAILABLE",
        )
        self.operation = operation


class RemoteQueryError(RemoteUnavailableError):
    """A backend query was rejected (e.g. missing index for an ordered query)"""

