"""Configuration management for the link registry."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    storage_backend: Literal["file", "memory", "redis"] = Field(
        default="file",
        description="Where the link collection is persisted"
    )

    storage_dir: str = Field(
        default="~/.url_registry",
        description="Directory for the file storage backend"
    )

    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for the redis storage backend"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    sweep_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between expired-link sweeps while the server runs"
    )

    # Link settings
    base_url: str = Field(
        default="http://localhost:9200",
        description="Origin used for short URLs when no request origin is available"
    )

    path_prefix: str = Field(
        default="",
        description="Route prefix for short URLs (e.g., '/r' for /r/abc12)"
    )

    short_id_length: int = Field(
        default=5,
        ge=1,
        description="Length of generated short identifiers"
    )

    enable_custom_aliases: bool = Field(
        default=True,
        description="Allow users to provide custom aliases"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=0,
        description="Maximum re-rolls when a generated identifier is taken"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
