"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Passiify"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./passiify.db"
    DB_ECHO: bool = False

    # JWT
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # API client
    API_BASE_URL: str = ""  # Explicit backend root, e.g. https://api.passiify.in (wins over hostname detection)
    CLIENT_HOSTNAME: Optional[str] = None  # Hostname the client is served from
    LOCAL_API_URL: str = "http://localhost:5000/api"
    PRODUCTION_API_URL: str = "https://passiify.onrender.com/api"
    REQUEST_TIMEOUT: float = 15.0
    CREDENTIALS_FILE: str = "~/.passiify/credentials.json"

    # Settlements console
    SETTLEMENT_PAGE_SIZE: int = 15

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
