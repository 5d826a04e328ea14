"""
Application settings for the catalog service.

All values come from the process environment (or a local ``.env``
file) and are read once at startup. The upstream base URLs are
optional here on purpose: a missing URL does not stop the process,
it only makes ``/catalog`` answer with a configuration error.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Upstream services
    authors_service_url: Optional[str] = None
    books_service_url: Optional[str] = None
    upstream_timeout_seconds: float = 10.0
    parallel_fetch: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    log_level: str = "INFO"

    @field_validator("authors_service_url", "books_service_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or None
        return v

    @property
    def upstreams_configured(self) -> bool:
        return bool(self.authors_service_url and self.books_service_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
