"""
Configuration management for the EasyEat ordering core
"""


import threading

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from easyeat.infrastructure.utilities.constants import BusinessSettings


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: str = Field("development")
    log_level: str = Field("INFO")
    log_dir: str = Field("logs")

    # Remote document store
    database_url: str = Field("sqlite:///data/easyeat.db")

    # Durable local storage for the local order list
    local_storage_path: str = Field("data/local_storage.json")

    # Checkout settings
    currency: str = Field(BusinessSettings.DEFAULT_CURRENCY, min_length=3, max_length=3)
    delivery_fee: float = Field(BusinessSettings.DEFAULT_DELIVERY_FEE, ge=0)

    # Order lifecycle
    auto_delivery_enabled: bool = Field(True)
    auto_delivery_delay_seconds: float = Field(
        BusinessSettings.AUTO_DELIVERY_DELAY_SECONDS, gt=0
    )
    order_refresh_interval_seconds: float = Field(
        BusinessSettings.ORDER_REFRESH_INTERVAL_SECONDS, gt=0
    )


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment"""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
