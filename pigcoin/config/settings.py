"""
Configuration Management for PigCoin

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, storage keys and logging behaviour are the only
knobs the application has.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.
    
    Loads configuration from PIGCOIN_* environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="PIGCOIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    
    # Storage
    data_dir: Path = Field(
        default=Path.home() / ".pigcoin",
        description="Directory holding the JSON snapshots"
    )
    transactions_key: str = Field(
        default="@pigcoin_transactions",
        min_length=1,
        description="Storage key for the transaction collection"
    )
    goals_key: str = Field(
        default="@pigcoin_goals",
        min_length=1,
        description="Storage key for the goal collection"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of console output"
    )
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
    
    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        return v.expanduser()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
