from functools import lru_cache
from typing import Self

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    SUBSYSTEM: str = "privlog"
    APP_ENV: str = "production"
    DEBUG: bool = False

    # Capabilities. None means "detect at runtime".
    PREVIEW_ENV_VAR: str = "PRIVLOG_PREVIEW"
    UNREDACTED_SESSION: bool | None = None
    PREVIEW_SESSION: bool | None = None

    # Capture store
    STORE_MAX_ENTRIES: int = 5000

    # Network monitoring
    NETWORK_MONITORING: bool = True

    @field_validator("SUBSYSTEM")
    @classmethod
    def validate_subsystem(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("SUBSYSTEM must not be empty")
        return v

    @field_validator("APP_ENV", mode="before")
    @classmethod
    def normalize_app_env(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def validate_store_configuration(self) -> Self:
        """Validate capture store bounds"""
        if self.STORE_MAX_ENTRIES < 1:
            raise ValueError("STORE_MAX_ENTRIES must be at least 1")
        return self

    @property
    def is_development(self) -> bool:
        return self.APP_ENV in ("development", "dev", "local")

    model_config = SettingsConfigDict(
        env_prefix="PRIVLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
