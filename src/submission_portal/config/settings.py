"""
Configuration settings for the submission portal.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Submission portal configuration settings.

    All settings can be overridden via environment variables.
    """

    # Upload backend (storage provider bridge)
    backend_url: str = Field(
        default="http://localhost:3001",
        description="Base URL for the upload backend"
    )
    upload_endpoint: str = Field(
        default="update",
        description="Path of the multipart upload endpoint"
    )
    upload_results_endpoint: str = Field(
        default="upload",
        description="Path returning the storage results of the last upload"
    )
    storage_file_url_prefix: str = Field(
        default="https://drive.google.com/file/d/",
        description="Prefix joined with the storage id to build contentStorageUrl"
    )

    # Portal API (submissions and issues)
    portal_api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL for the portal submissions/issues API"
    )
    api_timeout: int = Field(
        default=30,
        description="Timeout in seconds for API requests"
    )
    api_retries: int = Field(
        default=2,
        description="Retry attempts for idempotent GET requests"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_file: str = Field(
        default="logs/submission_portal.log",
        description="Rotating log file used outside debug mode"
    )

    # Rendering layer
    portal_user_id: Optional[str] = Field(
        default=None,
        description="User id used by the Streamlit page when no auth widget provides one"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
