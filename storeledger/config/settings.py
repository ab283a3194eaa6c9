"""
==============================================================================
Store Ledger Settings
==============================================================================

All configuration comes from environment variables or a .env file (see
.env.example); get_settings() builds the Settings once per process.

Store Clock:
-----------
Shift windows, record timestamps and the retention schedule all use the
naive wall clock of TIMEZONE (Asia/Seoul unless configured otherwise).

    RETENTION_DAYS=60        records older than this are purged
    RETENTION_RUN_HOUR=5     ...every day at 05:00 store time
    RETENTION_RUN_MINUTE=0

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)

KNOWN_ENVIRONMENTS = ("development", "staging", "production")
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """
    Store ledger configuration.

    Example:
        >>> Settings(retention_days=30).retention_days
        30
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # --- service ---
    app_name: str = Field(default="Store Ledger API")
    app_env: str = Field(default="development", description="development, staging or production")
    debug: bool = Field(default=False, description="DEBUG logging and SQL echo")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    cors_origins: str = Field(default='["*"]', description="JSON array of allowed origins")

    # --- ledger database ---
    database_url: str = Field(
        default="sqlite:///./storage/db/storeledger.db",
        description="SQLAlchemy URL of the ledger database"
    )

    # --- access tokens (subject = Kakao e-mail) ---
    jwt_secret_key: str = Field(default="change-this-in-production", min_length=16)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60, ge=1, le=1440)

    # --- store clock, summaries and retention ---
    timezone: str = Field(default="Asia/Seoul", description="IANA zone of the store wall clock")
    summary_suffix_template: str = Field(
        default=" and {count} more",
        description="Appended to a shift summary; {count} is the number of further records"
    )
    retention_enabled: bool = Field(default=True, description="Schedule the daily sweep on startup")
    retention_days: int = Field(default=60, ge=1, le=3650)
    retention_run_hour: int = Field(default=5, ge=0, le=23)
    retention_run_minute: int = Field(default=0, ge=0, le=59)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in KNOWN_ENVIRONMENTS:
            logger.warning(f"Unknown APP_ENV '{value}', using 'development'")
            return "development"
        return normalized

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        """Only shared-secret algorithms make sense with jwt_secret_key."""
        if value.upper() not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}, got {value}")
        return value.upper()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("summary_suffix_template")
    @classmethod
    def validate_suffix_template(cls, value: str) -> str:
        if "{count}" not in value:
            raise ValueError("SUMMARY_SUFFIX_TEMPLATE must contain '{count}'")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS_ORIGINS as a list; anything unparseable allows every origin."""
        try:
            origins = json.loads(self.cors_origins)
        except json.JSONDecodeError:
            logger.warning(f"CORS_ORIGINS is not JSON ({self.cors_origins!r}), allowing all")
            return ["*"]
        return origins if isinstance(origins, list) else ["*"]

    def sqlite_path(self) -> Optional[Path]:
        """File behind a sqlite:/// URL; None for in-memory or other backends."""
        prefix = "sqlite:///"
        if not self.database_url.startswith(prefix):
            return None
        location = self.database_url[len(prefix):]
        if location in ("", ":memory:"):
            return None
        return Path(location)

    def __repr__(self) -> str:
        return (
            f"Settings(app_env={self.app_env!r}, timezone={self.timezone!r}, "
            f"retention_days={self.retention_days})"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """The process-wide Settings; creates the SQLite directory if needed."""
    settings = Settings()

    db_path = settings.sqlite_path()
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)

    if settings.debug:
        logger.info(f"Configuration loaded: {settings!r}")
    return settings
