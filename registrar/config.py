"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a default: the desktop app runs with no environment at all
    - get_settings() is cached (lru_cache) — single instance per process
    - Durations are exposed as timedelta / seconds properties, stored as plain numbers

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - REGISTRAR_ prefix: avoids collisions with generic names such as DATA_DIR
"""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Registrar settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="REGISTRAR_", case_sensitive=False,
    )

    # Durable storage
    data_dir: Path = Path("data")
    seed_demo_data: bool = True

    # Cache
    cache_max_entries_per_namespace: int = Field(100, ge=1)
    cache_entity_ttl_seconds: float = Field(300.0, gt=0)

    # Notifications
    notification_retention_days: int = Field(30, ge=1)
    notification_recent_hours: int = Field(24, ge=1)

    # Accounts
    temporary_password: str = "password123"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def notification_retention(self) -> timedelta:
        return timedelta(days=self.notification_retention_days)

    @property
    def notification_recent_window(self) -> timedelta:
        return timedelta(hours=self.notification_recent_hours)


@lru_cache
def get_settings() -> Settings:
    return Settings()
