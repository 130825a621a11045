"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Primary weather provider (Google Weather API)
    google_weather_base_url: str = Field(
        default="https://weather.googleapis.com/v1",
        description="Base URL for the Google Weather API"
    )
    google_weather_api_key: str = Field(
        default="",
        description="API key for Google Weather (primary provider is skipped when empty)"
    )

    # Secondary weather provider (Open-Meteo, no credentials)
    open_meteo_base_url: str = Field(
        default="https://api.open-meteo.com/v1",
        description="Base URL for the Open-Meteo API"
    )
    open_meteo_timezone: str = Field(
        default="Asia/Kolkata",
        description="Timezone used for Open-Meteo daily aggregation"
    )

    # Provider request policy
    provider_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for a single provider request"
    )
    max_retry_attempts: int = Field(
        default=2,
        description="Maximum number of attempts for a provider request"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=1,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=4,
        description="Maximum wait time in seconds between retries"
    )

    # Forecast horizon
    forecast_days: int = Field(
        default=7,
        description="Number of daily forecast entries requested from providers"
    )
    hourly_forecast_hours: int = Field(
        default=48,
        description="Number of hourly forecast entries requested from the primary provider"
    )
    synthetic_weather_seed: int = Field(
        default=42,
        description="Seed for the synthetic fallback rainfall series"
    )

    # Default location when neither the query nor the farm carries coordinates
    default_latitude: float = Field(default=28.6139)
    default_longitude: float = Field(default=77.2090)
    default_state: str = Field(default="Delhi")
    default_district: str = Field(default="New Delhi")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Farm Climate Stress & Risk Assessment",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
