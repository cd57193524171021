from decimal import Decimal
from typing import Annotated

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings backed by Pydantic BaseSettings.
    Values are loaded from the environment and an optional .env file.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "TechTrend Commerce API"
    PROJECT_DESCRIPTION: str = "Stock, cart and payment settlement core for TechTrend"
    VERSION: str = "0.1.0"

    # Runtime
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("plain", description="Log output format: 'plain' or 'json'")
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN; error reporting is disabled when empty")
    CORS_ORIGINS: Annotated[list[str], NoDecode] = Field(default_factory=list, description="Allowed CORS origins outside debug mode")

    # Database
    DATABASE_URL: str = Field("sqlite+aiosqlite:///./techtrend.db", description="Async SQLAlchemy database URL")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Connection pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections after N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a pooled connection")

    # Cart
    CART_MAX_ITEMS: int = Field(50, description="Maximum active lines per cart")
    CART_ENFORCE_MAX_ITEMS: bool = Field(False, description="Reject adds that would exceed CART_MAX_ITEMS")

    # Payments
    PAYMENT_MAX_AMOUNT: Decimal = Field(Decimal("100000.00"), description="Largest amount a single payment may settle")
    PAYMENT_SUCCESS_RATE: float = Field(0.9, description="Probability that a simulated settlement succeeds")
    DEFAULT_CURRENCY: str = Field("PEN", description="Currency used when a request does not name one")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("CART_MAX_ITEMS")
    @classmethod
    def validate_cart_max_items(cls, v):
        if v < 1:
            raise ValueError("CART_MAX_ITEMS must be at least 1")
        return v

    @field_validator("PAYMENT_MAX_AMOUNT")
    @classmethod
    def validate_payment_max_amount(cls, v):
        if v <= 0:
            raise ValueError("PAYMENT_MAX_AMOUNT must be greater than zero")
        return v

    @field_validator("PAYMENT_SUCCESS_RATE")
    @classmethod
    def validate_success_rate(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError("PAYMENT_SUCCESS_RATE must be between 0 and 1")
        return v

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def validate_currency(cls, v):
        if len(v) != 3 or not v.isalpha():
            raise ValueError("DEFAULT_CURRENCY must be a 3-letter ISO code")
        return v.upper()

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @computed_field
    @property
    def is_development(self) -> bool:
        """Whether the service runs in a development-like environment"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local", "test"]

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.
    Avoids re-reading the environment on every call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
