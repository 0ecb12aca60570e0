"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
The knowledge dataset ships inside the package, so the only thing most
deployments set is the API key list.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Saif Training API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys. Using a list enables key rotation without downtime."
    )

    # Knowledge base
    knowledge_data_path: Optional[str] = Field(
        default=None,
        description="Path to a training knowledge JSON file. Defaults to the dataset bundled with the package."
    )

    # Workout backend
    backend_mock_mode: bool = Field(
        default=True,
        description="Use the in-memory workout backend. The remote backend is not wired into this service."
    )
    backend_fixture_path: Optional[str] = Field(
        default=None,
        description="Optional JSON fixture used to seed the in-memory workout backend"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set.

        Returns list of missing required fields. A missing knowledge file
        is not listed here: the knowledge service degrades to its static
        fallback instead of refusing to start.
        """
        missing = []

        if not self.api_keys_list:
            missing.append("API_KEYS")

        if not self.backend_mock_mode:
            missing.append("BACKEND_MOCK_MODE (remote backend is not available)")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
