"""
keygate.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the proxy server and the admin CLI.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KEYGATE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "keygate"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence (shared by the proxy and keygate-admin)
    database_url: str = "sqlite+aiosqlite:///./data.db"
    sqlite_busy_timeout_ms: int = Field(default=5000, ge=0)

    # Upstream calls. None leaves the request unbounded, like the transport default.
    upstream_timeout_seconds: float | None = Field(default=None, gt=0)

    # Upper bound on how long an access-log write may hold up a proxied request.
    access_log_timeout_seconds: float = Field(default=2.0, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Both entrypoints (`keygate.api.__main__` and `keygate.admin.cli`) read the same
# KEYGATE_DATABASE_URL, which is what keeps them pointed at one store.
