"""Configuration management for pflanzen-manager."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="pflanzen.db", description="Path to the embedded SQLite object store")

    # OpenRouter Configuration
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key for plant image analysis")

    # AI Model Configuration
    model_id: str = Field(
        default="openai/gpt-4o",
        description="Vision-capable model ID for OpenRouter (defaults to GPT-4o)",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    environment: str = Field(default="development", description="Deployment environment name")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production."""
        return self.environment == "production"


# Application Constants
class Constants:
    """Application-wide constants."""

    # Analysis service
    API_TIMEOUT_SECONDS: int = 30

    # Time arithmetic
    DAY_MS: int = 24 * 60 * 60 * 1000
    DAYS_PER_WEEK: int = 7
    DAYS_PER_MONTH: int = 30  # Fixed approximation, not calendar-accurate

    # Seasonal adjustment factors
    SUMMER_WATERING_FACTOR: float = 0.7
    WINTER_SLOWDOWN_FACTOR: float = 1.3

    # Task generation defaults
    DEFAULT_REPOTTING_WEEKS: int = 2
    CLEANING_FIRST_DUE_DAYS: int = 3
    CLEANING_INTERVAL_WEEKS: int = 2
    PHOTO_INTERVAL_WEEKS: int = 4

    # Fallback for recurring tasks with a missing or broken pattern
    FALLBACK_RECURRENCE_DAYS: int = 7

    # Watering overview
    DEFAULT_WATERING_FREQUENCY_DAYS: int = 7

    # Settings store key
    APP_SETTINGS_KEY: str = "app-settings"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
