"""
Configuration settings for the POST dispatcher.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "POST Dispatcher"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # === Destination & Payload ===
    TARGET_URL: str = "https://atomic.incfile.com/fakepost"
    POST_TITLE: str = "POST Request"
    POST_BODY: str = "This is a POST request"

    # === Dispatch ===
    CONCURRENCY_LIMIT: int = 10  # Max requests handled simultaneously
    REQUEST_COUNT: int = 5  # Requests per batch
    REQUEST_TIMEOUT: float = 30.0  # seconds

    # === Retry ===
    MAX_ATTEMPTS: int = 5  # Total attempts per request, first one included
    RETRYABLE_STATUS_CODES: list[int] = [429, 503, 504]
    RETRY_BASE_DELAY_MS: int = 1000  # Linear backoff: base * retry_number

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
