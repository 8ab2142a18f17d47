"""Application configuration and settings management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MARKDOWN_DOCX_", extra="ignore")

    app_name: str = Field(default="Markdown to DOCX API", description="Human readable application name.")
    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name.",
    )
    log_level: str = Field(default="INFO", description="Root logging level.")
    default_document_type: Literal["document", "report"] = Field(
        default="document",
        description="Document mode used when a request does not specify one.",
    )
    image_fetch_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for downloading a single image.",
    )
    image_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted image payload.",
    )
    image_width_px: int = Field(default=200, description="Width of the embedded image box in pixels.")
    image_height_px: int = Field(default=200, description="Height of the embedded image box in pixels.")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser.",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


settings = get_settings()
