"""Application configuration management using Pydantic Settings.

This module provides centralized configuration for the SmileHub backend,
supporting environment variables and .env files for different deployment environments.
"""

import secrets
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (parent of the smilehub/ package)
PROJECT_DIR = Path(__file__).parent.parent.parent
ENV_FILE = PROJECT_DIR / ".env"

# Load environment variables from .env file
load_dotenv(ENV_FILE)


def _generate_dev_secret_key() -> str:
    """Generate a temporary secret key for development ONLY."""
    return f"dev-only-insecure-{secrets.token_hex(24)}"


def _is_insecure_key(key: str) -> bool:
    """Check if the key is insecure (default placeholder or empty)."""
    insecure_patterns = [
        "change-this",
        "your-secret",
        "dev-only",
        "changeme",
        "secret-key-here",
        "placeholder",
    ]
    if not key or len(key) < 32:
        return True
    return any(pattern in key.lower() for pattern in insecure_patterns)


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DB_", populate_by_name=True)

    driver: str = Field(default="postgresql+asyncpg", description="Database driver")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    user: str = Field(default="smilehub", description="Database user")
    password: str = Field(default="", description="Database password")
    name: str = Field(default="smilehub", description="Database name")
    pool_size: int = Field(default=10, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, le=100, description="Max pool overflow")
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    # Full connection URL, takes precedence over the individual parts
    url_override: str | None = Field(
        default=None,
        validation_alias="DB_URL",
        description="Complete database URL (e.g. sqlite+aiosqlite:///./smilehub.db)",
    )

    @property
    def url(self) -> str:
        """Get database connection URL."""
        if self.url_override:
            return self.url_override
        return f"{self.driver}://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="SmileHub", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, ge=1, le=65535, description="Server port")
    workers: int = Field(default=4, ge=1, le=32, description="Number of workers")

    # Security settings
    secret_key: str = Field(
        default="",
        description="Secret key for JWT tokens",
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24, ge=5, description="Token expiration (one day)"
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:8080", "http://localhost:8081"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(default=True, description="Allow CORS credentials")

    # Request limits (image data URLs travel inside JSON bodies)
    max_request_body_mb: int = Field(
        default=10, ge=1, le=100, description="Maximum request body size in MB"
    )

    # Development helpers
    enable_demo_data: bool = Field(default=False, description="Seed a demo tenant on startup")

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @property
    def max_request_body_bytes(self) -> int:
        """Maximum accepted request body size in bytes."""
        return self.max_request_body_mb * 1024 * 1024

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings after initialization."""
        # Handle SECRET_KEY based on environment
        if _is_insecure_key(self.secret_key):
            if self.environment == "production":
                print(
                    "\n"
                    "=" * 70 + "\n"
                    "FATAL ERROR: SECRET_KEY is not configured for production!\n"
                    "=" * 70 + "\n"
                    "\n"
                    "A secure SECRET_KEY is required in production to sign\n"
                    "the bearer tokens issued to practice accounts.\n"
                    "\n"
                    "Generate a secure key with:\n"
                    "  openssl rand -hex 32\n"
                    "\n"
                    "Then set it in your environment or .env file:\n"
                    "  SECRET_KEY=<your-generated-key>\n"
                    "=" * 70 + "\n",
                    file=sys.stderr,
                )
                raise ValueError("SECRET_KEY must be set to a secure value in production")
            # Development mode - generate a temporary key and warn loudly
            temp_key = _generate_dev_secret_key()
            object.__setattr__(self, "secret_key", temp_key)
            print(
                "\n"
                "!" * 70 + "\n"
                "WARNING: Using auto-generated temporary SECRET_KEY for development!\n"
                "!" * 70 + "\n"
                "\n"
                "This key is NOT secure and will change on every restart,\n"
                "invalidating every issued token.\n"
                "\n"
                "Generate a key with: openssl rand -hex 32\n"
                "!" * 70 + "\n",
                file=sys.stderr,
            )

        # Production-specific validations
        if self.environment == "production":
            if self.debug:
                raise ValueError("Debug mode must be disabled in production (DEBUG=false)")
            if self.enable_demo_data:
                raise ValueError("Demo data must be disabled in production")

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
