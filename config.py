"""Application configuration using pydantic-settings."""

from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Database
    database_url: str = Field(default="", validate_default=True)
    db_echo: bool = False
    db_pool_size: int = 5
    db_pool_max_overflow: int = 10
    create_tables: bool = True  # create missing tables at startup

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: Annotated[List[str], NoDecode] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        # Fail fast, there is nothing useful to do without a store
        if not v:
            raise ValueError("DATABASE_URL is not set. Please check your .env file.")
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Build settings from the process environment and an optional `.env` path."""
        if env_file is None:
            return cls()
        return cls(_env_file=env_file)
