"""Application configuration using Pydantic Settings."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # MongoDB
    mongodb_url: str
    mongodb_db_name: str = "finroute"

    # Session (JWT)
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    session_cookie_name: str = "finroute_session"
    session_expiration_days: int = 30

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_model_name: str = "gemini-1.5-flash"

    # App
    environment: str = "development"
    default_currency: str = "USD"
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production (enables Secure cookies)."""
        return self.environment.lower() == "production"

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_expiration_days * 24 * 60 * 60


settings = Settings()
