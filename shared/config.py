"""
Shared configuration management for the Edge Cache Layer.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ORIGIN_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "mocks" / "origin" / "public"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="EDGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    log_format: str = Field(default="json")

    # Upstreams
    origin_server_url: str = Field(default="http://localhost:8080")
    api_server_url: str = Field(default="http://localhost:3000")
    origin_timeout_seconds: float = Field(default=10.0, gt=0)
    api_timeout_seconds: float = Field(default=10.0, gt=0)

    # Edge cache
    cache_ttl_seconds: int = Field(default=3600, ge=0)
    api_prefix: str = Field(default="/api/")

    # Origin collaborator
    origin_public_dir: Path = Field(default=DEFAULT_ORIGIN_PUBLIC_DIR)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
