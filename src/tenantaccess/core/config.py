"""Configuration management for TenantAccess.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DEPARTMENTS = ["IT", "Finance", "Sales", "HR", "Operations", "Marketing"]

DEFAULT_PERMISSIONS = [
    "Dashboard",
    "Accounting",
    "Sales",
    "Customers",
    "Vendors",
    "Banking",
    "Reports",
    "Payroll",
    "Inventory",
    "Company Settings",
    "User Management",
]


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TENANTACCESS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "TenantAccess"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./ta_data/tenantaccess.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False
    db_sqlite_foreign_keys: bool = True

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Credential Policy Settings
    password_expiry_days: int = Field(
        default=90,
        ge=1,
        description="Days a password stays valid after invitation or reset",
    )
    password_expiry_warning_days: int = Field(
        default=7,
        ge=0,
        description="Accounts whose password expires within this window need a reset",
    )
    password_policy_enabled: bool = True
    password_min_length: int = Field(default=8, ge=1)
    password_require_uppercase: bool = True
    password_require_lowercase: bool = True
    password_require_digit: bool = True
    password_require_special: bool = False

    # Directory Catalogs
    departments: list[str] = Field(default_factory=lambda: list(DEFAULT_DEPARTMENTS))
    permissions: list[str] = Field(default_factory=lambda: list(DEFAULT_PERMISSIONS))
    system_role_name: str = "Super Admin"

    @field_validator(
        "cors_origins", "cors_allow_methods", "cors_allow_headers", mode="before"
    )
    @classmethod
    def parse_csv_list(cls, v: str | list[str]) -> list[str]:
        """Parse a list from a comma-separated string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("departments", "permissions", mode="before")
    @classmethod
    def parse_catalog(cls, v: str | list[str]) -> list[str]:
        """Parse a catalog from a comma-separated string or list.

        Duplicates are dropped while keeping the first occurrence's position.
        """
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",")]
        return list(dict.fromkeys(item for item in v if item))

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
