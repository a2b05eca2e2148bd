"""Application configuration with Pydantic Settings.

Settings are loaded from environment variables and the ``.env`` file.

Examples:
    >>> from inkwell.config import get_settings
    >>> settings = get_settings()
    >>> settings.STORAGE_BACKEND
    <StorageBackendType.FILESYSTEM: 'filesystem'>
    >>> settings.storage_config().root
    PosixPath('state')
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inkwell.storage.config import StorageConfig


class StorageBackendType(str, Enum):
    """Where blogs and posts are persisted."""

    FILESYSTEM = "filesystem"
    DATABASE = "database"


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        STORAGE_BACKEND: Which storage backend serves requests
        STORAGE_ROOT: Base directory of the filesystem backend
        DATABASE_URL: Connection string of the database backend
        DEBUG: Enable docs URLs, error details and SQL echo
        LOG_LEVEL: Root log level
        FLASH_COOKIE_NAME: Cookie carrying one-shot flash messages
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Storage
    STORAGE_BACKEND: StorageBackendType = Field(
        default=StorageBackendType.FILESYSTEM,
        description="Storage backend (filesystem or database)",
    )
    STORAGE_ROOT: Path = Field(
        default=Path("./state"),
        description="Base directory for filesystem storage",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./inkwell.db",
        description="Database connection string",
    )

    # Application Settings
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level",
    )
    FLASH_COOKIE_NAME: str = Field(
        default="inkwell_flash",
        description="Cookie name for flash messages",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    def storage_config(self) -> StorageConfig:
        """Build the filesystem storage configuration."""
        return StorageConfig(root=self.STORAGE_ROOT)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
