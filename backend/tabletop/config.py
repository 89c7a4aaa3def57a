"""Application configuration management"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

# Base directory: backend/
_BASE_DIR = Path(__file__).resolve().parent.parent
_DEV_SECRET_KEY = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    APP_NAME: str = "Tabletop Sessions"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 4

    # Database (PostgreSQL via asyncpg, SQLite via aiosqlite for local runs)
    DATABASE_URL: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "tabletop_db"
    POSTGRES_USER: str = "tabletop"
    POSTGRES_PASSWORD: str = "tabletop"
    DATABASE_POOL_SIZE: int = 30
    DATABASE_MAX_OVERFLOW: int = 20

    # Security
    SECRET_KEY: str = _DEV_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_TOKEN_BYTES: int = 32

    # Password hashing
    BCRYPT_ROUNDS: int = 12
    PASSWORD_HASH_WORKERS: int = 4

    # Listing defaults, applied at the API boundary
    DEFAULT_PAGE_LIMIT: int = 50
    MAX_PAGE_LIMIT: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:3000"]

    # Database initialization discipline
    DB_INIT_MODE: str = "migrate"  # migrate | create_all | off
    DB_REQUIRE_HEAD: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        """CORS_ORIGINS may be a JSON list or a comma-separated string"""
        if not isinstance(value, str):
            return value
        raw = value.strip()
        if raw.startswith("["):
            origins = json.loads(raw)
        else:
            origins = raw.split(",")
        return [str(origin).strip() for origin in origins if str(origin).strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return level

    def get_log_file(self) -> str:
        """LOG_FILE, or logs/tabletop.log next to the backend directory"""
        if self.LOG_FILE:
            return self.LOG_FILE
        return str(_BASE_DIR.parent / "logs" / "tabletop.log")

    def get_database_url(self) -> str:
        """DATABASE_URL if set, else an asyncpg URL assembled from POSTGRES_* (credentials URL-encoded)"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        user = quote_plus(self.POSTGRES_USER)
        password = quote_plus(self.POSTGRES_PASSWORD)
        return (
            f"postgresql+asyncpg://{user}:{password}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    def validate_security_settings(self) -> None:
        """
        Refuse to start a production deployment with development secrets.

        Raises:
            ValueError: On a default or short SECRET_KEY, a cheap bcrypt cost,
                or a non-HMAC signing algorithm
        """
        if self.ENVIRONMENT.lower() != "production":
            return

        if self.SECRET_KEY == _DEV_SECRET_KEY or len(self.SECRET_KEY) < 32:
            raise ValueError("SECRET_KEY must be set to at least 32 characters in production")

        if self.BCRYPT_ROUNDS < 10:
            raise ValueError("BCRYPT_ROUNDS must be at least 10 in production")

        if not self.ALGORITHM.startswith("HS"):
            raise ValueError("Access tokens are signed with a shared secret; ALGORITHM must be HS256/384/512")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
