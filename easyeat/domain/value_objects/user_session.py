"""
User session value object

What the identity provider hands to the ordering core: an opaque user id,
an optional display name and the role the user signed in with.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """Which surface the user signed in to"""

    CUSTOMER = "customer"
    CHEF = "chef"


@dataclass(frozen=True)
class UserSession:
    """Signed-in user"""

    user_id: str
    display_name: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER

    def __post_init__(self):
        if not isinstance(self.user_id, str) or not self.user_id.strip():
            raise ValueError("User ID must be a non-empty string")

    @property
    def is_chef(self) -> bool:
        return self.role == UserRole.CHEF

    def __str__(self) -> str:
        return self.display_name or self.user_id
