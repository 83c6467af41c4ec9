"""
Configuration and settings for the content service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    environment: Literal["development", "production"] = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Database (Postgres expected)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # Blog posts: the posts table (either shape) or the external blog's feed
    blog_source: Literal["table", "legacy_table", "rss"] = Field(default="table")
    external_blog_url: str = Field(default="https://blog.reflectivesessions.org")
    rss_feed_url: str = Field(
        default="https://blog.reflectivesessions.org/feeds/posts/default?alt=rss"
    )
    rss_proxy_url: str = Field(default="https://api.allorigins.win/raw?url=")
    rss_item_limit: int = Field(default=10, ge=1)
    request_timeout_seconds: float = Field(default=30, gt=0)

    # Auth sessions
    session_ttl_seconds: int = Field(default=7 * 24 * 60 * 60, gt=0)
    recovery_ttl_seconds: int = Field(default=60 * 60, gt=0)
    password_reset_url: str = Field(
        default="http://localhost:3000/#/reset-password"
    )

    @property
    def post_shape(self) -> Literal["rich", "legacy"]:
        return "legacy" if self.blog_source == "legacy_table" else "rich"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
