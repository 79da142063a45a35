"""Configuration management for SettleUp."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .formatting import SUPPORTED_CURRENCIES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SETTLE_UP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Display currency (no conversion is ever applied)
    currency: str = "USD"

    # Ledger snapshot used by the CLI
    ledger_path: Path = Path.home() / ".settle_up" / "ledger.json"

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        code = value.upper()
        if code not in SUPPORTED_CURRENCIES:
            raise ValueError(
                f"Unsupported currency {value!r}; "
                f"expected one of {', '.join(SUPPORTED_CURRENCIES)}"
            )
        return code


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your SETTLE_UP_* environment "
            f"variables or .env file.\n"
            f"Error: {e}"
        ) from e
