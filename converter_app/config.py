"""Configuration settings for the Conversion Store API."""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration (SQLite for local/tests, PostgreSQL via env var for Docker)
    database_url: str = "sqlite:///conversion_store.db"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # JWT Configuration
    jwt_secret_key: str = "dev-secret-key-change-in-production"

    # Pagination
    history_page_size: int = 20
    favorites_page_size: int = 50
    max_page_size: int = 100

    @field_validator("api_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port numbers are in valid range."""
        if not 1 <= v <= 65535:
            msg = "Port must be between 1 and 65535"
            raise ValueError(msg)
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v:
            msg = "Database URL cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate JWT secret key."""
        if not v:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)
        if len(v) < 16:
            msg = "JWT secret key must be at least 16 characters long"
            raise ValueError(msg)
        return v

    @field_validator("history_page_size", "favorites_page_size", "max_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Validate page sizes are positive."""
        if v < 1:
            msg = "Page sizes must be positive integers"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_default_page_sizes(self) -> "Settings":
        """Ensure default page sizes fit under the maximum page size."""
        if max(self.history_page_size, self.favorites_page_size) > self.max_page_size:
            msg = "Default page sizes cannot exceed max_page_size"
            raise ValueError(msg)
        return self


# Global settings instance
settings = Settings()
