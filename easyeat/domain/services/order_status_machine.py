"""
Order Status State Machine

Pure rules for which status changes an order may go through, and how the
operational status maps onto the coarser status customers see.
"""

from typing import Dict, List, Union

from easyeat.domain.value_objects.order_status import CustomerOrderStatus, OrderStatus
from easyeat.infrastructure.utilities.exceptions import TransitionError

StatusLike = Union[OrderStatus, CustomerOrderStatus, str]


class OrderStatusMachine:
    """Transition rules for operational and customer-facing statuses"""

    # Valid operational transitions
    STATUS_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
        OrderStatus.NEW: [OrderStatus.PREPARING, OrderStatus.CANCELLED],
        OrderStatus.PREPARING: [OrderStatus.READY, OrderStatus.CANCELLED],
        OrderStatus.READY: [OrderStatus.COMPLETED],
        OrderStatus.COMPLETED: [],  # Terminal state
        OrderStatus.CANCELLED: [],  # Terminal state
    }

    # Valid transitions of a local order
    CUSTOMER_STATUS_TRANSITIONS: Dict[CustomerOrderStatus, List[CustomerOrderStatus]] = {
        CustomerOrderStatus.IN_PROGRESS: [
            CustomerOrderStatus.DELIVERED,
            CustomerOrderStatus.CANCELLED,
        ],
        CustomerOrderStatus.DELIVERED: [],  # Terminal state
        CustomerOrderStatus.CANCELLED: [],  # Terminal state
    }

    CUSTOMER_STATUS_MAP: Dict[OrderStatus, CustomerOrderStatus] = {
        OrderStatus.NEW: CustomerOrderStatus.IN_PROGRESS,
        OrderStatus.PREPARING: CustomerOrderStatus.IN_PROGRESS,
        OrderStatus.READY: CustomerOrderStatus.IN_PROGRESS,
        OrderStatus.COMPLETED: CustomerOrderStatus.DELIVERED,
        OrderStatus.CANCELLED: CustomerOrderStatus.CANCELLED,
    }

    # Customer statuses that have an operational counterpart
    OPERATIONAL_STATUS_MAP: Dict[CustomerOrderStatus, OrderStatus] = {
        CustomerOrderStatus.DELIVERED: OrderStatus.COMPLETED,
        CustomerOrderStatus.CANCELLED: OrderStatus.CANCELLED,
    }

    # Values written by older clients into the document store
    LEGACY_STATUS_ALIASES: Dict[str, OrderStatus] = {
        "pending": OrderStatus.NEW,
        "in-progress": OrderStatus.NEW,
        "delivered": OrderStatus.COMPLETED,
    }

    @classmethod
    def parse_status(cls, status: StatusLike) -> OrderStatus:
        """Operational status from a stored or requested value"""
        if isinstance(status, OrderStatus):
            return status
        value = str(status).strip().lower()
        if value in cls.LEGACY_STATUS_ALIASES:
            return cls.LEGACY_STATUS_ALIASES[value]
        try:
            return OrderStatus(value)
        except ValueError as e:
            raise ValueError(f"Unknown order status: {status!r}") from e

    @classmethod
    def parse_customer_status(cls, status: StatusLike) -> CustomerOrderStatus:
        """Customer status from either vocabulary"""
        if isinstance(status, CustomerOrderStatus):
            return status
        value = str(status).strip().lower()
        try:
            return CustomerOrderStatus(value)
        except ValueError:
            return cls.to_customer_status(cls.parse_status(value))

    @classmethod
    def to_customer_status(cls, status: StatusLike) -> CustomerOrderStatus:
        """Coarse customer view of an operational status"""
        if isinstance(status, CustomerOrderStatus):
            return status
        return cls.CUSTOMER_STATUS_MAP[cls.parse_status(status)]

    @classmethod
    def to_operational_status(cls, status: CustomerOrderStatus) -> OrderStatus | None:
        """Operational counterpart of a customer status, None for in-progress"""
        return cls.OPERATIONAL_STATUS_MAP.get(status)

    @classmethod
    def allowed_transitions(cls, current_status: StatusLike) -> List[OrderStatus]:
        return list(cls.STATUS_TRANSITIONS[cls.parse_status(current_status)])

    @classmethod
    def is_terminal(cls, status: StatusLike) -> bool:
        """completed/cancelled, or delivered/cancelled for customer statuses"""
        if isinstance(status, CustomerOrderStatus):
            return not cls.CUSTOMER_STATUS_TRANSITIONS[status]
        return not cls.STATUS_TRANSITIONS[cls.parse_status(status)]

    @classmethod
    def can_transition(cls, current_status: StatusLike, new_status: StatusLike) -> bool:
        """Check if an operational status transition is valid"""
        try:
            current = cls.parse_status(current_status)
            target = cls.parse_status(new_status)
        except ValueError:
            return False
        if current == target:
            return False  # No point in updating to same status
        return target in cls.STATUS_TRANSITIONS[current]

    @classmethod
    def validate_transition(
        cls, current_status: StatusLike, new_status: StatusLike
    ) -> OrderStatus:
        """Return the parsed target status or raise TransitionError"""
        if not cls.can_transition(current_status, new_status):
            raise TransitionError(str(current_status), str(new_status))
        return cls.parse_status(new_status)

    @classmethod
    def validate_customer_transition(
        cls, current_status: StatusLike, new_status: StatusLike
    ) -> CustomerOrderStatus:
        """Same as validate_transition for a local order's customer status"""
        try:
            current = cls.parse_customer_status(current_status)
            target = cls.parse_customer_status(new_status)
        except ValueError as e:
            raise TransitionError(str(current_status), str(new_status)) from e

        if current == target or target not in cls.CUSTOMER_STATUS_TRANSITIONS[current]:
            raise TransitionError(current.value, target.value)
        return target
