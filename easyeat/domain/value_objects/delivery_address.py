"""
Delivery Address value object
"""

from dataclasses import dataclass

from easyeat.infrastructure.utilities.constants import BusinessSettings


@dataclass(frozen=True)
class DeliveryAddress:
    """Delivery address value object with validation"""

    value: str

    def __post_init__(self):
        """Validate delivery address"""
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Delivery address cannot be empty")

        cleaned_address = self.value.strip()

        if len(cleaned_address) > BusinessSettings.MAX_DELIVERY_ADDRESS_LENGTH:
            raise ValueError(
                "Delivery address cannot exceed "
                f"{BusinessSettings.MAX_DELIVERY_ADDRESS_LENGTH} characters"
            )

        object.__setattr__(self, "value", cleaned_address)

    def __str__(self) -> str:
        return self.value
