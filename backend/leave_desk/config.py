from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Leave Desk"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///./leave_desk.db"
    auto_create_tables: bool = True
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Request store persistence. Bump storage_key on schema changes and move the
    # previous key into deprecated_storage_keys so it is purged on startup.
    storage_key: str = "leave-desk:requests:v3"
    deprecated_storage_keys: list[str] = [
        "leave-desk:requests",
        "leave-desk:requests:v1",
        "leave-desk:requests:v2",
    ]

    base_vacation_days: int = 15
    base_compensatory_days: int = 4
    page_size: int = 5

    mock_seed: int = 20251115
    owner_employee_id: str = "emp001"
    owner_employee_name: str = "Employee Name"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
