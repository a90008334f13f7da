"""Typed runtime settings with dotenv support and startup validation."""

from decimal import Decimal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and ledger configuration.

    Environment variable names map directly to field names in uppercase.
    Example: `log_level` reads from `LOG_LEVEL`.

    Attributes:
        environment_name: Runtime environment label.
        service_name: Service label reported by info and health endpoints.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root logging level name.
        market_price_seed: Optional JSON symbol-to-price map replacing the built-in seed prices.
        api_trade_list_max_limit: Maximum number of trades returned by the trade list endpoint.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    service_name: str = Field(default="fifo-pnl-ledger", min_length=1)
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    market_price_seed: dict[str, Decimal] | None = Field(default=None)
    api_trade_list_max_limit: int = Field(default=1000, ge=1)

    @field_validator("service_name")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unsupported log_level={value}")
        return normalized_value

    @field_validator("market_price_seed")
    @classmethod
    def _validate_market_price_seed(cls, value: dict[str, Decimal] | None) -> dict[str, Decimal] | None:
        if value is None:
            return None
        for symbol, price in value.items():
            if not symbol.strip():
                raise ValueError("market_price_seed symbols must not be blank")
            if not price.is_finite() or price <= 0:
                raise ValueError(f"market_price_seed price for {symbol} must be positive")
        return value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
