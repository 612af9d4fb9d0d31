"""Configuration management for the PageBolt MCP server."""

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://pagebolt.dev"


class PageBoltConfig(BaseSettings):
    """Configuration for the PageBolt MCP server."""

    model_config = SettingsConfigDict(
        env_prefix="PAGEBOLT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: Optional[str] = Field(
        default=None,
        description="PageBolt API key. Set via PAGEBOLT_API_KEY environment variable.",
    )

    base_url: str = Field(default=DEFAULT_BASE_URL, description="PageBolt API base URL")

    timeout: float = Field(
        default=120.0, description="Request timeout in seconds"  # video renders are slow
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase for logging compatibility."""
        return v.upper()

    def get_api_key(self) -> str:
        """
        Get the PageBolt API key.

        Returns:
            API key string

        Raises:
            ValueError: If no API key is configured
        """
        if self.api_key:
            return self.api_key

        raise ValueError(
            "PAGEBOLT_API_KEY environment variable is required. "
            f"Get your free API key at {DEFAULT_BASE_URL}"
        )


def load_config(**overrides: Any) -> PageBoltConfig:
    """Load configuration from environment and files, applying non-empty overrides."""
    return PageBoltConfig(**{k: v for k, v in overrides.items() if v is not None})
