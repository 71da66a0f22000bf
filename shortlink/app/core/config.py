from pydantic_settings import BaseSettings

from shortlink.app.core.enums import LogLevel


class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Shortlink"
    DEBUG: bool = True
    USE_CORRELATION_ID: bool = True
    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Logging
    LOG_LEVEL: str = LogLevel.INFO

    SENTRY_DSN: str | None = None

    # Link service backend
    API_BASE_URL: str = "http://localhost:8080/api"

    # Identity
    USER_ID_STORAGE_KEY: str = "userId"
    USER_ID_PREFIX: str = "user_"
    USER_ID_LENGTH: int = 9
    IDENTITY_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 365 * 10  # ten years

    # Display
    LONG_URL_DISPLAY_LENGTH: int = 50
    QR_BOX_SIZE: int = 6
    QR_BORDER: int = 2

    # Per-user client state kept in memory
    MAX_WORKSPACES: int = 1024

    class Config:
        env_file = ".env"
        env_prefix = "SHORTLINK_"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
