from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str | None = None

    # Identity tokens
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"

    # Application URLs
    APP_BASE_URL: str = "http://localhost:8001"  # Default for development
    FRONTEND_URL: str | None = None
    CORS_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()
