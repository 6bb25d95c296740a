"""Configuration management for the operator."""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_BASE_URL


class Config(BaseSettings):
    """Configuration settings for the Better Stack Operator."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="operator.log", description="Empty disables the file sink")

    # Kubernetes Configuration
    kubeconfig: Optional[str] = Field(default=None)

    # Reconciliation
    error_requeue_seconds: float = Field(default=30.0, gt=0)

    # Better Stack
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    default_base_url: str = Field(default=DEFAULT_BASE_URL)
